"""
User Repository - Data Access Layer for accounts and credentials

Reset tokens are stored as SHA-256 digests; callers pass digests, never
the raw token.
"""
from datetime import datetime
from typing import Optional

from psycopg2.errors import UniqueViolation

from marketplace.core.database import get_db_connection_dict
from marketplace.core.errors import BadRequestError
from marketplace.domain.user import User, UserCredentials


USER_COLUMNS = "id, email, name, role, is_active, created_at, updated_at"


class UserRepository:
    """Repository for users and their password-reset state"""

    def find_by_id(self, user_id: int) -> Optional[User]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()
            return User(**row) if row else None
        finally:
            cursor.close()
            conn.close()

    def find_credentials_by_email(self, email: str) -> Optional[UserCredentials]:
        """Find a user with its password hash (login only)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {USER_COLUMNS}, password_hash
                FROM users
                WHERE LOWER(email) = LOWER(%s)
            """, (email,))
            row = cursor.fetchone()
            return UserCredentials(**row) if row else None
        finally:
            cursor.close()
            conn.close()

    def create(self, email: str, password_hash: str, name: Optional[str], role: str) -> User:
        """
        Insert a new user.

        Raises:
            BadRequestError: if the e-mail is already registered
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO users (email, password_hash, name, role, is_active, created_at, updated_at)
                VALUES (%s, %s, %s, %s, TRUE, NOW(), NOW())
                RETURNING {USER_COLUMNS}
            """, (email.lower(), password_hash, name, role))
            row = cursor.fetchone()
            conn.commit()
            return User(**row)
        except UniqueViolation:
            conn.rollback()
            raise BadRequestError("Email already registered")
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def set_reset_token(self, user_id: int, token_digest: str, expires_at: datetime) -> None:
        """Store a fresh reset token, replacing any previous one"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE users
                SET reset_password_token = %s, reset_password_expires = %s, updated_at = NOW()
                WHERE id = %s
            """, (token_digest, expires_at, user_id))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def reset_password_with_token(self, token_digest: str, password_hash: str) -> Optional[int]:
        """
        Consume a reset token and set the new password in one statement.

        The WHERE clause matches the token and an unexpired expiry; the same
        UPDATE clears both, so a token can succeed at most once even under
        concurrent requests.

        Returns:
            The user ID whose password changed, or None if the token is
            unknown or expired
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE users
                SET password_hash = %s,
                    reset_password_token = NULL,
                    reset_password_expires = NULL,
                    updated_at = NOW()
                WHERE reset_password_token = %s
                  AND reset_password_expires > NOW()
                RETURNING id
            """, (password_hash, token_digest))
            row = cursor.fetchone()
            conn.commit()
            return row['id'] if row else None
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
