"""
Account Service
Registration, login and the token-based password reset flow

Reset tokens are random URL-safe strings mailed to the user; only their
SHA-256 digest is stored. Consuming a token is a single conditional update
(see UserRepository.reset_password_with_token).
"""
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from marketplace.core.auth import create_access_token, hash_password, pwd_context, verify_password
from marketplace.core.config import settings
from marketplace.core.errors import AuthenticationRequiredError, BadRequestError, NotFoundError
from marketplace.domain.user import User, UserRegister
from marketplace.repositories.user_repository import UserRepository
from marketplace.services.email_service import send_password_reset_email


logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token."


def hash_reset_token(token: str) -> str:
    """Hash a reset token using SHA-256"""
    return hashlib.sha256(token.encode()).hexdigest()


class AccountService:

    def __init__(self, repository: UserRepository = None,
                 send_reset_email: Callable[[str, str], Tuple[bool, Optional[str]]] = None):
        self.repository = repository or UserRepository()
        self.send_reset_email = send_reset_email or send_password_reset_email

    def register(self, data: UserRegister) -> User:
        user = self.repository.create(
            email=data.email,
            password_hash=hash_password(data.password),
            name=data.name,
            role=data.role.value
        )
        logger.info(f"Registered user {user.id} as {user.role.value}")
        return user

    def get_user(self, user_id: int) -> User:
        user = self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Verify credentials and issue an access token.

        Raises:
            AuthenticationRequiredError: same message for every failure
        """
        credentials = self.repository.find_credentials_by_email(email)
        if credentials is None:
            # Keeps login timing similar for unknown e-mails
            pwd_context.dummy_verify()
            raise AuthenticationRequiredError("Invalid email or password")

        if not verify_password(password, credentials.password_hash) or not credentials.is_active:
            logger.warning(f"Failed login for user {credentials.id}")
            raise AuthenticationRequiredError("Invalid email or password")

        user = User(**credentials.model_dump(exclude={'password_hash'}))
        token = create_access_token(user.id, user.email, user.role.value, user.name)
        return token, user

    def request_password_reset(self, email: str) -> None:
        """
        Issue a reset token for an active account and e-mail it.

        Silent for unknown or inactive accounts so the response does not
        reveal which e-mails are registered.
        """
        credentials = self.repository.find_credentials_by_email(email)
        if credentials is None or not credentials.is_active:
            logger.info("Password reset requested for an unknown or inactive account")
            return

        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        self.repository.set_reset_token(credentials.id, hash_reset_token(token), expires_at)

        sent, error_details = self.send_reset_email(credentials.email, token)
        if sent:
            logger.info(f"Password reset e-mail sent to user {credentials.id}")
        else:
            logger.warning(f"Password reset e-mail delivery failed for user {credentials.id}: {error_details}")

    def reset_password(self, token: Optional[str], new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            BadRequestError: token missing, unknown or expired (one message
                for unknown and expired)
        """
        if not token:
            raise BadRequestError("Token is required.")

        password_hash = hash_password(new_password)
        user_id = self.repository.reset_password_with_token(hash_reset_token(token), password_hash)
        if user_id is None:
            logger.warning("Password reset attempted with an invalid or expired token")
            raise BadRequestError(INVALID_RESET_TOKEN_MESSAGE)

        logger.info(f"Password reset completed for user {user_id}")


# Singleton instance for easy import
_account_service: Optional[AccountService] = None

def get_account_service() -> AccountService:
    """Get the singleton account service instance"""
    global _account_service
    if _account_service is None:
        _account_service = AccountService()
    return _account_service
