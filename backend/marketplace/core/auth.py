"""
Authentication for the Marketplace API
Issues and validates HS256 JWTs and provides the request principal
"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from pydantic import BaseModel

from marketplace.core.config import settings
from marketplace.core.errors import AuthenticationRequiredError


logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# bcrypt with a deliberately slow cost factor
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class Principal(BaseModel):
    """Authenticated actor extracted from a JWT"""
    id: str
    email: str
    name: Optional[str] = None
    role: Role = Role.BUYER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _get_auth_secret() -> str:
    secret = settings.AUTH_SECRET
    if not secret:
        raise RuntimeError("AUTH_SECRET environment variable is not set")
    return secret


def create_access_token(user_id, email: str, role: str, name: Optional[str] = None) -> str:
    """
    Sign an access token for a user.

    Payload:
    {
        "sub": "42",
        "id": "42",
        "email": "ana@example.com",
        "name": "Ana",
        "role": "seller",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "id": str(user_id),
        "email": email,
        "name": name,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, _get_auth_secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """
    Decode a bearer token into a Principal.

    Raises:
        AuthenticationRequiredError: expired, tampered or incomplete token
    """
    try:
        payload = jwt.decode(token, _get_auth_secret(), algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationRequiredError("Token has expired")
    except JWTError:
        raise AuthenticationRequiredError("Invalid token")

    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")

    if not user_id or not email or role not in {r.value for r in Role}:
        raise AuthenticationRequiredError("Invalid token payload")

    return Principal(id=str(user_id), email=email, name=payload.get("name"), role=Role(role))


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Principal]:
    """
    Optional authentication - returns None if no valid token provided.

    Handlers that must answer a missing principal with their own status
    (e.g. 403 on product deletion) depend on this one.
    """
    if not credentials:
        return None

    try:
        return decode_access_token(credentials.credentials)
    except AuthenticationRequiredError as e:
        logger.info(f"Rejected bearer token: {e.message}")
        return None


async def get_current_user(
    principal: Optional[Principal] = Depends(get_current_user_optional)
) -> Principal:
    """Dependency that requires an authenticated principal (401 otherwise)"""
    if principal is None:
        raise AuthenticationRequiredError("Unauthorized")
    return principal
