"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.config import settings

router = APIRouter()

API_VERSION = "1.0.0"


@router.get("/health")
async def health_check():
    """Liveness probe with a timestamp and the API version."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "environment": settings.environment,
    }
