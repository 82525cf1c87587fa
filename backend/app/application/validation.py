"""Schema validation as a tagged result instead of exception control flow.

``validate`` never raises for schema violations: callers receive either a
``Valid`` wrapping the coerced model or an ``Invalid`` listing every violated
field. Anything else raised while parsing is a genuine bug and propagates.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Violation:
    """A single violated constraint."""

    path: list[str | int]
    message: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "message": self.message, "code": self.code}


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    value: ModelT


@dataclass(frozen=True)
class Invalid:
    violations: list[Violation] = field(default_factory=list)


ValidationResult = Valid[ModelT] | Invalid


def validate(schema: type[ModelT], data: Any) -> "ValidationResult[ModelT]":
    """Parse and coerce *data* against *schema*."""
    try:
        return Valid(schema.model_validate(data))
    except PydanticValidationError as exc:
        return Invalid(
            [
                Violation(path=list(err["loc"]), message=err["msg"], code=err["type"])
                for err in exc.errors()
            ]
        )
