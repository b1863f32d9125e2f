"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment / .env"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Settings
    API_TITLE: str = "Marketplace API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Marketplace backend: accounts, listings, payments and revenue reporting"
    LOG_LEVEL: str = "INFO"

    # Database (validated when a connection is requested)
    DATABASE_URL: str = ""

    # Authentication
    AUTH_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_HASH_ROUNDS: int = 12
    AUTH_RATE_LIMIT_PER_MINUTE: int = 5
    # Only enable behind a proxy that overwrites X-Forwarded-For
    TRUST_FORWARDED_FOR: bool = False

    # Password reset
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    RESEND_API_KEY: str = ""
    PASSWORD_RESET_SENDER_EMAIL: str = "no-reply@marketplace.local"
    PASSWORD_RESET_SUBJECT: str = "Reset your Marketplace password"

    # Payment gateway
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    STRIPE_TIMEOUT_SECONDS: float = 30.0
    FRONTEND_URL: str = ""
    PAYMENT_FALLBACK_RETURN_URL: str = "https://your-frontend-url.com/payment/success"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def payment_return_url(self) -> str:
        """Return URL handed to the gateway for redirect-based flows"""
        return self.FRONTEND_URL or self.PAYMENT_FALLBACK_RETURN_URL


settings = Settings()
