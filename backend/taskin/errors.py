"""
Typed failures returned by handlers.

Handlers never raise for expected failures such as a missing entity; they
return a ``Result`` whose ``error`` describes what went wrong. The HTTP layer
decides what to do with it (usually ``result.unwrap()``).
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    BUSINESS = "business"


@dataclass(frozen=True)
class Error:
    """A machine code, a human message and the values the message refers to."""

    code: str
    message: str
    kind: ErrorKind = ErrorKind.BUSINESS
    values: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def not_found(cls, entity: str, entity_id: Any) -> "Error":
        return cls(
            code="ENTITY_NOT_FOUND",
            message=f"Entity of type {entity} with id {entity_id} not found",
            kind=ErrorKind.NOT_FOUND,
            values=(entity, str(entity_id)),
        )

    @classmethod
    def validation(cls, message: str, *values: Any) -> "Error":
        return cls(
            code="VALIDATION_ERROR",
            message=message,
            kind=ErrorKind.VALIDATION,
            values=values,
        )


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a handler: either a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[Error] = None

    def __post_init__(self):
        if self.error is not None and self.value is not None:
            raise ValueError("A failed result cannot carry a value")

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Error) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, or raise TaskinException for the error middleware."""
        if self.error is not None:
            from taskin.exceptions import TaskinException

            raise TaskinException(self.error)
        return self.value
