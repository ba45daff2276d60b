"""Shared exceptions for service layer operations."""
from typing import ClassVar, Literal

ErrorCode = Literal["validation", "conflict", "not_found"]


class UnauthorizedError(Exception):
    """
    Raised when an operation runs without a resolved user.

    This is the one failure the core raises instead of returning as data: it means
    a caller skipped the identity gate, not that a user typed something wrong.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class OperationError(Exception):
    """
    Base class for expected failures of a single operation.

    The query facade catches these and returns them as ActionResult data, so the
    presentation layer can show them inline.
    """

    code: ClassVar[ErrorCode]

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(OperationError):
    """Raised when a required field is missing, empty, or refers to nothing usable."""

    code = "validation"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, field=field)


class ConflictError(OperationError):
    """Raised on a uniqueness violation or when a record is still referenced."""

    code = "conflict"


class NotFoundError(OperationError):
    """
    Raised when a scoped update/delete matched no rows.

    Does not distinguish "doesn't exist" from "belongs to someone else".
    """

    code = "not_found"

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"{entity_name} not found")


class StorageError(Exception):
    """Raised when the database fails unexpectedly. Not retried."""

    def __init__(self, message: str = "Storage is unavailable") -> None:
        super().__init__(message)
