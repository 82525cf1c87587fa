"""Application service (use case) for Article operations."""

import logging
from dataclasses import replace

from app.application.interfaces import ArticleRepository
from app.application.schemas import ArticleCreate, ArticleUpdate
from app.domain.entities import Article

logger = logging.getLogger(__name__)


class ArticleService:
    """Orchestrates article operations. Depends on the repository port (DI).

    Holds no persistence or validation logic: every method delegates to exactly
    one repository operation and normalizes what comes back.
    """

    def __init__(self, repository: ArticleRepository):
        self._repository = repository

    @staticmethod
    def _normalize(article: Article) -> Article:
        """Coerce the stored flag (0/1, "0"/"1", bool) into a strict bool."""
        raw = article.is_active
        if isinstance(raw, (bytes, str)):
            raw = raw not in (b"", b"\x00", b"0", "", "0", "false", "False")
        return replace(article, is_active=bool(raw))

    async def create_article(self, data: ArticleCreate) -> Article:
        try:
            article = await self._repository.create(data)
        except Exception as exc:
            logger.error("ArticleService.create_article failed: %s", exc)
            raise
        return self._normalize(article)

    async def get_article(self, article_id: int) -> Article | None:
        try:
            article = await self._repository.find_by_id(article_id)
        except Exception as exc:
            logger.error("ArticleService.get_article failed (id=%s): %s", article_id, exc)
            raise
        return self._normalize(article) if article else None

    async def find_articles(
        self,
        name: str | None = None,
        is_active: bool | None = None,
        exact_match: bool = False,
    ) -> list[Article]:
        logger.info(
            "Finding articles: name=%r, is_active=%s, exact_match=%s",
            name, is_active, exact_match,
        )
        try:
            articles = await self._repository.find(name, is_active, exact_match)
        except Exception as exc:
            logger.error("ArticleService.find_articles failed: %s", exc)
            raise
        logger.info("Found %d articles", len(articles))
        return [self._normalize(article) for article in articles]

    async def update_article(self, article_id: int, data: ArticleUpdate) -> Article | None:
        try:
            article = await self._repository.update(article_id, data)
        except Exception as exc:
            logger.error(
                "ArticleService.update_article failed (id=%s, changes=%s): %s",
                article_id, data.changes(), exc,
            )
            raise
        return self._normalize(article) if article else None

    async def deactivate_article(self, article_id: int) -> bool:
        try:
            return await self._repository.deactivate(article_id)
        except Exception as exc:
            logger.error("ArticleService.deactivate_article failed (id=%s): %s", article_id, exc)
            raise
