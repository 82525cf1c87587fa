"""Articles API controller: one method per route, one service call per method."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.application.schemas import (
    ArticleCreate,
    ArticleIdParams,
    ArticleListQuery,
    ArticlePartitionResponse,
    ArticleResponse,
    ArticleUpdate,
    ErrorResponse,
    MessageResponse,
)
from app.application.services import ArticleService
from app.domain.entities import Article
from app.presentation.middleware.auth import AuthGate
from app.presentation.middleware.validation import ValidationGate

logger = logging.getLogger(__name__)

_validate_id = ValidationGate(ArticleIdParams, "params")
_validate_create = ValidationGate(ArticleCreate, "body")
_validate_update = ValidationGate(ArticleUpdate, "body")
_validate_list = ValidationGate(ArticleListQuery, "query")


# ── Helpers ──────────────────────────────────────────────────────────


def _to_response(article: Article) -> ArticleResponse:
    return ArticleResponse.model_validate(article, from_attributes=True)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _coerce_id(raw: object) -> int | None:
    """Second line of defence behind the params gate."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


# ── Controller ───────────────────────────────────────────────────────


class ArticleController:
    """Maps validated requests to ArticleService calls and results to responses.

    Errors it does not recognize are left to propagate untouched.
    """

    def __init__(self, service: ArticleService):
        self._service = service

    async def create_article(
        self, data: ArticleCreate = Depends(_validate_create)
    ) -> ArticleResponse:
        """Create a new article."""
        article = await self._service.create_article(data)
        logger.info("Article %s created", article.id)
        return _to_response(article)

    async def get_article(
        self, params: ArticleIdParams = Depends(_validate_id)
    ) -> ArticleResponse | JSONResponse:
        """Retrieve a single article by ID."""
        article = await self._service.get_article(params.id)
        if article is None:
            return _message(status.HTTP_404_NOT_FOUND, "Article not found.")
        return _to_response(article)

    async def list_articles(
        self, query: ArticleListQuery = Depends(_validate_list)
    ) -> ArticlePartitionResponse:
        """List articles matching ``name``, split into active and inactive."""
        logger.info(
            "Listing articles: name=%r, exactMatch=%s", query.name, query.exact_match
        )
        found = await self._service.find_articles(query.name, None, query.exact_match)
        return ArticlePartitionResponse(
            active=[_to_response(a) for a in found if a.is_active],
            inactive=[_to_response(a) for a in found if not a.is_active],
        )

    async def update_article(
        self,
        params: ArticleIdParams = Depends(_validate_id),
        data: ArticleUpdate = Depends(_validate_update),
    ) -> ArticleResponse | JSONResponse:
        """Partially update an article; an empty body changes nothing."""
        article_id = _coerce_id(params.id)
        if article_id is None:
            return _message(status.HTTP_400_BAD_REQUEST, "Invalid article ID.")

        article = await self._service.update_article(article_id, data)
        if article is None:
            return _message(status.HTTP_404_NOT_FOUND, "Article not found for update.")
        return _to_response(article)

    async def deactivate_article(
        self, params: ArticleIdParams = Depends(_validate_id)
    ) -> MessageResponse | JSONResponse:
        """Deactivate an article. Irreversible through this endpoint."""
        article_id = _coerce_id(params.id)
        if article_id is None:
            return _message(status.HTTP_400_BAD_REQUEST, "Invalid article ID.")

        if not await self._service.deactivate_article(article_id):
            return _message(
                status.HTTP_404_NOT_FOUND, "Article not found or already inactive."
            )
        return MessageResponse(message="Article deactivated successfully.")


def build_articles_router(controller: ArticleController, auth_gate: AuthGate) -> APIRouter:
    """Bind controller methods to routes; write routes sit behind the auth gate."""
    router = APIRouter(prefix="/articles", tags=["Articles"])
    protected = [Depends(auth_gate)]
    errors = {
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }

    router.add_api_route(
        "",
        controller.create_article,
        methods=["POST"],
        status_code=status.HTTP_201_CREATED,
        response_model=ArticleResponse,
        dependencies=protected,
        responses=errors,
    )
    router.add_api_route(
        "",
        controller.list_articles,
        methods=["GET"],
        response_model=ArticlePartitionResponse,
        responses={500: errors[500]},
    )
    router.add_api_route(
        "/{id}",
        controller.get_article,
        methods=["GET"],
        response_model=ArticleResponse,
        responses=errors,
    )
    router.add_api_route(
        "/{id}",
        controller.update_article,
        methods=["PATCH"],
        response_model=ArticleResponse,
        dependencies=protected,
        responses=errors,
    )
    router.add_api_route(
        "/{id}/deactivate",
        controller.deactivate_article,
        methods=["PATCH"],
        response_model=MessageResponse,
        dependencies=protected,
        responses=errors,
    )
    return router
