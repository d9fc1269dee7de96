"""
Health check endpoint
"""
from fastapi import APIRouter
from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service status, version and environment.
    """
    return {
        "status": "ok",
        "service": "payzen-backend",
        "version": settings.VERSION or "1.0.0",
        "env": settings.APP_ENV,
    }
