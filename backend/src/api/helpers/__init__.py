"""API helper utilities."""
from api.helpers.results import http_error, raise_for_result

__all__ = [
    "http_error",
    "raise_for_result",
]
