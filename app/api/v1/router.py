"""Aggregate all API routers."""

from fastapi import APIRouter
from app.api.v1.health import router as health_router
from app.api.v1.styles import router as styles_router
from app.api.v1.upload import router as upload_router
from app.api.v1.generate import router as generate_router
from app.api.v1.status import router as status_router
from app.api.v1.download import router as download_router

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router, tags=["health"])
api_router.include_router(styles_router, tags=["styles"])
api_router.include_router(upload_router, tags=["upload"])
api_router.include_router(generate_router, tags=["generate"])
api_router.include_router(status_router, tags=["status"])
api_router.include_router(download_router, tags=["download"])
