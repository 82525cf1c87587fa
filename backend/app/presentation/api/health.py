"""Health check endpoint: no dependencies, always available."""

from fastapi import APIRouter

from app.config import Settings


def build_health_router(settings: Settings) -> APIRouter:
    router = APIRouter(tags=["Health"])

    @router.get("/health")
    async def health_check() -> dict:
        """Returns the current application health status."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.app_env,
        }

    return router
