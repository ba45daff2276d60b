"""Resolved identity of the caller of a request."""
from dataclasses import dataclass
from uuid import UUID

from services.exceptions import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """
    Who is making the request: a verified user id, or nobody.

    Built once per request by core.auth.resolve_identity and handed to the query
    facade. Reading it has no side effects.
    """

    user_id: UUID | None = None
    roles: tuple[str, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        """True when a user was resolved."""
        return self.user_id is not None

    def current_user_id(self) -> UUID | None:
        """Return the resolved user id, or None for anonymous callers."""
        return self.user_id

    def require_user_id(self) -> UUID:
        """
        Return the resolved user id.

        Raises:
            UnauthorizedError: If no user was resolved.
        """
        if not self.is_authenticated:
            raise UnauthorizedError()
        return self.user_id


ANONYMOUS = Identity()
