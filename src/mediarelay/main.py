"""Main application entrypoint for MediaRelay."""

from fastapi import FastAPI

from mediarelay.api.middleware import HTTPErrorLoggingMiddleware
from mediarelay.api.v1 import routes_health
from mediarelay.api.v1.routes_media import root_router, router as media_router
from mediarelay.core.config import settings
from mediarelay.core.logging import setup_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Initialize logging first
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )

    app.add_middleware(HTTPErrorLoggingMiddleware)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(media_router)
    app.include_router(root_router, tags=["media"])

    return app


# Export app instance for ASGI servers
app = create_app()
