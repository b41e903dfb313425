"""
Health Routes - Health check endpoints
"""
from fastapi import APIRouter

from habitclub.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness probe; does not touch the database"""
    return {"status": "ok", "timezone": settings.APP_TIMEZONE}
