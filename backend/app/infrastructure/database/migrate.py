"""One-shot schema migration.

Creates the ``articles`` table if it does not exist yet. Safe to run on every
deploy::

    python -m app.infrastructure.database.migrate
"""

import asyncio
import logging
import sys

from sqlalchemy.schema import CreateTable

from app.config import get_settings
from app.infrastructure.database.models import ArticleModel
from app.infrastructure.database.pool import ConnectionPool
from app.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


async def run_migrations(pool: ConnectionPool) -> None:
    """Apply the schema on a single pooled connection."""
    logger.info("Starting database migrations...")
    async with pool.connection() as conn:
        logger.info("Applying migration: create table articles")
        await conn.execute(CreateTable(ArticleModel.__table__, if_not_exists=True))
        await conn.commit()
    logger.info("All migrations applied")


async def _main() -> int:
    settings = get_settings()
    setup_logging(settings)
    pool = ConnectionPool.from_settings(settings)
    try:
        await run_migrations(pool)
    except Exception:
        logger.exception("Database migration failed")
        return 1
    finally:
        await pool.shutdown()
    return 0


def main() -> None:
    sys.exit(asyncio.run(_main()))


if __name__ == "__main__":
    main()
