"""Structured results returned by the query facade's mutations."""
from dataclasses import dataclass
from typing import Generic, TypeVar

from services.exceptions import ErrorCode, OperationError

T = TypeVar("T")


@dataclass
class ActionResult(Generic[T]):
    """
    Outcome of a mutation: a success message, or an error the caller can render.

    `record` carries the created/updated entity when there is one.
    """

    message: str | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    field: str | None = None
    record: T | None = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, message: str, record: T | None = None) -> "ActionResult[T]":
        """Build a successful result."""
        return cls(message=message, record=record)

    @classmethod
    def failure(cls, exc: OperationError) -> "ActionResult[T]":
        """Build a failed result from an expected operation error."""
        return cls(error=exc.message, error_code=exc.code, field=exc.field)
