"""Pydantic DTOs (Data Transfer Objects) for the Article feature."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, StrictBool, StringConstraints, field_validator

ArticleName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]
ArticleBrand = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]


class ArticleCreate(BaseModel):
    """Schema for creating a new article."""

    name: ArticleName = Field(..., examples=["Mechanical Keyboard"])
    brand: ArticleBrand = Field(..., examples=["LogiTech"])


class ArticleUpdate(BaseModel):
    """Schema for a partial update: every field optional, ``null`` not allowed.

    Only the fields present in the request end up in ``model_fields_set``;
    an empty object is a valid no-op update.
    """

    name: ArticleName | None = None
    brand: ArticleBrand | None = None
    is_active: StrictBool | None = None

    @field_validator("name", "brand", "is_active", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field may be omitted but must not be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class ArticleIdParams(BaseModel):
    """Path parameters for routes addressing a single article."""

    id: int


class ArticleListQuery(BaseModel):
    """Query string for the listing route. Never rejects a request."""

    name: str | None = None
    exact_match: bool = Field(False, alias="exactMatch")

    @field_validator("exact_match", mode="before")
    @classmethod
    def _only_literal_true(cls, value: Any) -> bool:
        return value is True or value == "true"


class ArticleResponse(BaseModel):
    """Schema returned to the client."""

    id: int
    name: str
    brand: str
    modified_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class ArticlePartitionResponse(BaseModel):
    """Listing result split by the ``is_active`` flag."""

    active: list[ArticleResponse]
    inactive: list[ArticleResponse]


class MessageResponse(BaseModel):
    message: str


class ViolationSchema(BaseModel):
    path: list[str | int]
    message: str
    code: str


class ErrorResponse(BaseModel):
    """Uniform error body. ``errors`` only for validation, ``stack`` only outside production."""

    message: str
    errors: list[ViolationSchema] | None = None
    stack: str | None = None
