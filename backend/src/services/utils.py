"""Shared utility functions for service layer."""
from uuid import UUID

from services.exceptions import ValidationError


def require_text(
    value: str | None,
    field: str,
    label: str,
    max_length: int | None = None,
) -> str:
    """
    Return the trimmed value of a required text field.

    Raises:
        ValidationError: If the value is missing, only whitespace, or longer than
            max_length once trimmed.
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(field, f"{label} is required")
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(field, f"{label} must be at most {max_length} characters")
    return cleaned


def parse_uuid(value: str | UUID) -> UUID | None:
    """
    Interpret an identifier as a UUID.

    Identifiers from URLs may be either an id or a slug; anything that isn't a
    well-formed UUID is treated as "not an id" rather than an error.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (TypeError, ValueError):
        return None
