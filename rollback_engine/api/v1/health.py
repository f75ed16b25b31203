from fastapi import APIRouter

from rollback_engine import __version__
from rollback_engine.config import settings

router = APIRouter()

@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": __version__
    }
