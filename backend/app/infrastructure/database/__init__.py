from .base import Base
from .pool import ConnectionPool, ExecuteResult, build_database_url
from .models import ArticleModel

__all__ = [
    "Base",
    "ConnectionPool",
    "ExecuteResult",
    "build_database_url",
    "ArticleModel",
]
