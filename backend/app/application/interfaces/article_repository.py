"""Abstract repository interfaces (ports): define the contract, not the implementation."""

from abc import ABC, abstractmethod

from app.application.schemas import ArticleCreate, ArticleUpdate
from app.domain.entities import Article


class ArticleRepository(ABC):
    """Port for article persistence, implemented in the infrastructure layer.

    Absence is a normal outcome and is reported as ``None``/``False``;
    exceptions are reserved for store failures and consistency violations.
    """

    @abstractmethod
    async def create(self, data: ArticleCreate) -> Article:
        """Insert an active article and return it as re-read from the store."""
        ...

    @abstractmethod
    async def find_by_id(self, article_id: int) -> Article | None:
        """Retrieve a single article by its ID."""
        ...

    @abstractmethod
    async def find(
        self,
        name: str | None = None,
        is_active: bool | None = None,
        exact_match: bool = False,
    ) -> list[Article]:
        """Retrieve articles by name (substring unless *exact_match*) and active flag."""
        ...

    @abstractmethod
    async def update(self, article_id: int, data: ArticleUpdate) -> Article | None:
        """Apply only the fields present in *data*. Returns None if the id is unknown."""
        ...

    @abstractmethod
    async def deactivate(self, article_id: int) -> bool:
        """Mark an active article inactive. Returns True if a row was affected."""
        ...
