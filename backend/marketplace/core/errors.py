"""
Error hierarchy for the Marketplace API

Every domain failure is a MarketplaceError carrying a short user-facing
message and the HTTP status it maps to. Internal errors (expose=False)
are answered with a generic message; the real one only reaches the logs.
"""
from fastapi import status


GENERIC_ERROR_MESSAGE = "Internal server error"


class MarketplaceError(Exception):
    """Base exception for all Marketplace errors"""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    expose: bool = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.headers = None

    def to_response(self) -> dict:
        """Convert to the standard error envelope"""
        return {
            "status": "error",
            "message": self.message if self.expose else GENERIC_ERROR_MESSAGE,
        }


class AuthenticationRequiredError(MarketplaceError):
    http_status = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(MarketplaceError):
    http_status = status.HTTP_403_FORBIDDEN


class NotFoundError(MarketplaceError):
    http_status = status.HTTP_404_NOT_FOUND


class BadRequestError(MarketplaceError):
    http_status = status.HTTP_400_BAD_REQUEST


class PaymentGatewayError(MarketplaceError):
    """Gateway failure that is not the caller's fault (network, 5xx, auth)"""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    expose = False


class RateLimitExceededError(MarketplaceError):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, limit: int, retry_after: int):
        super().__init__(message)
        self.headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": "0",
            "Retry-After": str(retry_after),
        }
