"""
Global exception handlers for the Marketplace API

- MarketplaceError -> {"status": "error", "message": ...} with its HTTP status
- RequestValidationError -> 400 {"errors": [...]} per-field issues
- Exception (catch-all) -> 500, never leaks internal details
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from marketplace.core.errors import GENERIC_ERROR_MESSAGE, MarketplaceError


logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        if exc.http_status >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": GENERIC_ERROR_MESSAGE},
        )


def build_validation_error_response(exc: RequestValidationError) -> dict:
    """One issue per failing field; the request location prefix is dropped"""
    issues = []
    for error in exc.errors():
        location = list(error.get("loc", ()))
        if location and location[0] in ("body", "query", "path"):
            location = location[1:]
        issues.append({
            "path": location,
            "message": error.get("msg"),
            "code": error.get("type"),
        })
    return {"errors": issues}
