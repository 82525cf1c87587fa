"""Top-level API router: mounts every feature router under ``/api``."""

from fastapi import APIRouter

from app.config import Settings
from app.presentation.api.articles_controller import ArticleController, build_articles_router
from app.presentation.api.health import build_health_router
from app.presentation.middleware.auth import AuthGate


def build_api_router(
    settings: Settings, controller: ArticleController, auth_gate: AuthGate
) -> APIRouter:
    router = APIRouter(prefix="/api")
    router.include_router(build_health_router(settings))
    router.include_router(build_articles_router(controller, auth_gate))
    return router
