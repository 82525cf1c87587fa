"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.services import ArticleService
from app.config import Settings, get_settings
from app.infrastructure.database import ConnectionPool
from app.infrastructure.database.migrate import run_migrations
from app.infrastructure.database.repositories import PooledArticleRepository
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.articles_controller import ArticleController
from app.presentation.api.router import build_api_router
from app.presentation.middleware.auth import AuthGate
from app.presentation.middleware.errors import ErrorNormalizerMiddleware, register_error_handlers
from app.presentation.middleware.request_logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def _build_lifespan(
    settings: Settings, pool: ConnectionPool
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan: probe the store, migrate if asked, drain on exit."""
        setup_logging(settings)

        # 1. Single connectivity probe (logged, never fatal)
        await pool.open()

        # 2. Optional schema migration
        if settings.db_auto_migrate:
            await run_migrations(pool)

        logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)
        yield

        # Shutdown
        await pool.shutdown()

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    Wiring is explicit: pool → repository → service → controller. Missing
    database parameters or a missing API-key secret abort startup here.
    """
    settings = settings or get_settings()

    pool = ConnectionPool.from_settings(settings)
    service = ArticleService(PooledArticleRepository(pool))
    controller = ArticleController(service)
    auth_gate = AuthGate(settings.api_key_secret)

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=_build_lifespan(settings, pool),
    )

    # ── Middleware (innermost first) ─────────────────────────────────
    app.add_middleware(ErrorNormalizerMiddleware, expose_stack=not settings.is_production)
    app.add_middleware(RequestLoggingMiddleware, enabled=settings.is_development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Mount API routes
    app.include_router(build_api_router(settings, controller, auth_gate))

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
    )


if __name__ == "__main__":
    run()
