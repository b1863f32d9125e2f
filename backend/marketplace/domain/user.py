"""
User Domain Models

Account records and the request payloads that create or change them.
The password hash and reset token never leave the repository layer.
"""
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from marketplace.core.auth import Role


PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def _check_password_strength(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    if not re.search(r"[A-Za-z]", value):
        raise ValueError("Password must contain at least one letter")
    if not re.search(r"\d", value):
        raise ValueError("Password must contain at least one number")
    return value


class User(BaseModel):
    """User domain model (public fields only)"""
    id: int
    email: EmailStr
    name: Optional[str] = None
    role: Role
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class UserCredentials(User):
    """User plus the stored password hash, used for login checks"""
    password_hash: str


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    name: Optional[str] = Field(None, max_length=120)
    role: Role = Role.BUYER

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)

    @field_validator("role")
    @classmethod
    def no_admin_signup(cls, value: Role) -> Role:
        if value == Role.ADMIN:
            raise ValueError("Admin accounts cannot be self-registered")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Body of the reset-password request; the token travels in the query"""
    new_password: str = Field(
        ...,
        alias="newPassword",
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)
