"""Root conftest: shared test configuration."""

import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure tests never pick up a real secret or database from the environment
os.environ.setdefault("API_KEY_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("APP_ENV", "test")

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402

API_KEY = "test-secret-key"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'articles.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(
        database_url=database_url,
        api_key_secret=API_KEY,
        app_env="test",
        db_pool_size=3,
        db_auto_migrate=True,
    )


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to a fully started app over a fresh SQLite file."""
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-api-key": API_KEY}
