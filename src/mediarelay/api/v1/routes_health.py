"""Health check endpoint for MediaRelay."""

from fastapi import APIRouter

from mediarelay.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Does not contact B2; every upload authorizes on its own.

    Returns:
        dict: Health status response with status, service, and version fields
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
    }
