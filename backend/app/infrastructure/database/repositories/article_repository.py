"""Concrete repository implementation backed by the connection pool.

Statements are built with SQLAlchemy Core so every value travels as a bound
parameter; nothing is interpolated into SQL text.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import insert, select, true, update

from app.application.interfaces import ArticleRepository
from app.application.schemas import ArticleCreate, ArticleUpdate
from app.domain.entities import Article
from app.domain.exceptions import PersistenceError
from app.infrastructure.database.models import ArticleModel
from app.infrastructure.database.models.article import utcnow
from app.infrastructure.database.pool import ConnectionPool

logger = logging.getLogger(__name__)

articles = ArticleModel.__table__

_COLUMNS = (
    articles.c.id,
    articles.c.name,
    articles.c.brand,
    articles.c.modified_at,
    articles.c.is_active,
)
_UPDATABLE = ("name", "brand", "is_active")

# Autoincrement keys start at 1; the column is a signed 32-bit INTEGER
_MAX_ID = 2**31 - 1


def _addressable(article_id: int) -> bool:
    return 1 <= article_id <= _MAX_ID


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back the stored UTC value without its offset
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class PooledArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port on top of a ConnectionPool."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def _to_entity(self, row: dict[str, Any]) -> Article:
        """Map a result row → domain entity (flag left in store representation)."""
        return Article(
            id=row["id"],
            name=row["name"],
            brand=row["brand"],
            modified_at=_as_utc(row["modified_at"]),
            is_active=row["is_active"],
        )

    async def create(self, data: ArticleCreate) -> Article:
        try:
            result = await self._pool.execute(
                insert(articles).values(name=data.name, brand=data.brand, is_active=True)
            )
            inserted_id = result.inserted_id
            if not inserted_id:
                raise PersistenceError("Insert did not return a generated article id")

            rows = await self._pool.query(select(*_COLUMNS).where(articles.c.id == inserted_id))
            if not rows:
                raise PersistenceError(f"Article {inserted_id} not found after creation")
            return self._to_entity(rows[0])
        except Exception as exc:
            logger.error("ArticleRepository.create failed: %s", exc)
            raise

    async def find_by_id(self, article_id: int) -> Article | None:
        if not _addressable(article_id):
            return None
        try:
            rows = await self._pool.query(select(*_COLUMNS).where(articles.c.id == article_id))
        except Exception as exc:
            logger.error("ArticleRepository.find_by_id failed (id=%s): %s", article_id, exc)
            raise
        return self._to_entity(rows[0]) if rows else None

    async def find(
        self,
        name: str | None = None,
        is_active: bool | None = None,
        exact_match: bool = False,
    ) -> list[Article]:
        stmt = select(*_COLUMNS)
        if name:
            if exact_match:
                stmt = stmt.where(articles.c.name == name)
            else:
                stmt = stmt.where(articles.c.name.contains(name, autoescape=True))
        if is_active is not None:
            stmt = stmt.where(articles.c.is_active == is_active)
        stmt = stmt.order_by(articles.c.id)

        try:
            rows = await self._pool.query(stmt)
        except Exception as exc:
            logger.error(
                "ArticleRepository.find failed (name=%r, is_active=%s, exact_match=%s): %s",
                name, is_active, exact_match, exc,
            )
            raise
        return [self._to_entity(row) for row in rows]

    async def update(self, article_id: int, data: ArticleUpdate) -> Article | None:
        if not _addressable(article_id):
            return None
        changes = {key: value for key, value in data.changes().items() if key in _UPDATABLE}
        if not changes:
            logger.info("No fields to update for article %s", article_id)
            return await self.find_by_id(article_id)

        stmt = (
            update(articles)
            .where(articles.c.id == article_id)
            .values(**changes, modified_at=utcnow())
        )
        try:
            result = await self._pool.execute(stmt)
        except Exception as exc:
            logger.error(
                "ArticleRepository.update failed (id=%s, changes=%s): %s",
                article_id, changes, exc,
            )
            raise
        if result.rows_affected == 0:
            return None
        return await self.find_by_id(article_id)

    async def deactivate(self, article_id: int) -> bool:
        if not _addressable(article_id):
            return False
        stmt = (
            update(articles)
            .where(articles.c.id == article_id, articles.c.is_active == true())
            .values(is_active=False, modified_at=utcnow())
        )
        try:
            result = await self._pool.execute(stmt)
        except Exception as exc:
            logger.error("ArticleRepository.deactivate failed (id=%s): %s", article_id, exc)
            raise
        return result.rows_affected > 0
