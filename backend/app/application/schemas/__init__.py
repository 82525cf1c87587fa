from .article import (
    ArticleCreate,
    ArticleIdParams,
    ArticleListQuery,
    ArticlePartitionResponse,
    ArticleResponse,
    ArticleUpdate,
    ErrorResponse,
    MessageResponse,
    ViolationSchema,
)

__all__ = [
    "ArticleCreate",
    "ArticleIdParams",
    "ArticleListQuery",
    "ArticlePartitionResponse",
    "ArticleResponse",
    "ArticleUpdate",
    "ErrorResponse",
    "MessageResponse",
    "ViolationSchema",
]
