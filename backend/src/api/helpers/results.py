"""Translate service outcomes into HTTP errors."""
from fastapi import HTTPException, status

from services.results import ActionResult

STATUS_BY_ERROR_CODE = {
    "validation": 422,
    "conflict": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
}


def http_error(
    code: str,
    message: str,
    field: str | None = None,
) -> HTTPException:
    """
    Build the HTTPException for an expected operation failure.

    Validation errors carry the offending field so clients can show them inline;
    other errors use a plain message as the detail.
    """
    detail: str | dict[str, str] = message
    if code == "validation":
        detail = {"message": message, "field": field or ""}
    return HTTPException(status_code=STATUS_BY_ERROR_CODE[code], detail=detail)


def raise_for_result(result: ActionResult) -> None:
    """
    Raise an HTTPException if a facade mutation failed.

    Raises:
        HTTPException: 422 for validation, 409 for conflict, 404 for not found.
    """
    if result.ok:
        return
    raise http_error(result.error_code or "validation", result.error or "", result.field)

