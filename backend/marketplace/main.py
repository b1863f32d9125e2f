"""
Marketplace - Backend API
Accounts, product listings, payments and revenue reporting
"""
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api import payments, products, revenue, users
from marketplace.api.error_handlers import register_error_handlers
from marketplace.core.config import settings
from marketplace.core.database import check_database


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routers
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])
app.include_router(revenue.router, prefix="/api/v1/revenue", tags=["Revenue"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Marketplace API",
        "status": "online",
        "version": settings.API_VERSION
    }


@app.get("/health")
async def health():
    """Health check endpoint - tests database connectivity"""
    db_status = "connected"
    db_latency_ms = None

    try:
        db_latency_ms = check_database()
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "marketplace-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms
        }
    }
