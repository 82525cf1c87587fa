from .article_repository import PooledArticleRepository

__all__ = [
    "PooledArticleRepository",
]
