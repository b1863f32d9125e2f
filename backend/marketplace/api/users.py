"""
Users API Endpoints
- Registration and login
- Forgot / reset password (token based, no session)

bcrypt hashing and database calls block, so these handlers are plain
functions that FastAPI runs in its threadpool.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from marketplace.core.auth import Principal, get_current_user
from marketplace.core.rate_limit import rate_limit
from marketplace.domain.user import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
)
from marketplace.services.account_service import AccountService, get_account_service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    data: UserRegister,
    _: None = Depends(rate_limit()),
    service: AccountService = Depends(get_account_service)
):
    user = service.register(data)
    return {"status": "success", "data": user.to_dict()}


@router.post("/login")
def login(
    credentials: UserLogin,
    _: None = Depends(rate_limit()),
    service: AccountService = Depends(get_account_service)
):
    token, user = service.login(credentials.email, credentials.password)
    return {"status": "success", "token": token, "user": user.to_dict()}


@router.get("/me")
def get_me(
    principal: Principal = Depends(get_current_user),
    service: AccountService = Depends(get_account_service)
):
    user = service.get_user(int(principal.id))
    return {"status": "success", "data": user.to_dict()}


@router.post("/forgot-password")
def forgot_password(
    data: ForgotPasswordRequest,
    _: None = Depends(rate_limit()),
    service: AccountService = Depends(get_account_service)
):
    """Always answers the same way, whether or not the e-mail exists"""
    service.request_password_reset(data.email)
    return {"message": "If this email exists, a reset link has been sent."}


@router.post("/reset-password")
def reset_password(
    data: ResetPasswordRequest,
    token: Optional[str] = Query(None, description="Reset token from the e-mailed link"),
    _: None = Depends(rate_limit()),
    service: AccountService = Depends(get_account_service)
):
    service.reset_password(token, data.new_password)
    return {"message": "Password has been reset successfully."}
