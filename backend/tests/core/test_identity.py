"""Tests for the request Identity."""
import pytest
from uuid6 import uuid7

from core.identity import ANONYMOUS, Identity
from services.exceptions import UnauthorizedError


def test__identity__anonymous() -> None:
    assert ANONYMOUS.is_authenticated is False
    assert ANONYMOUS.current_user_id() is None
    with pytest.raises(UnauthorizedError):
        ANONYMOUS.require_user_id()


def test__identity__authenticated() -> None:
    user_id = uuid7()
    identity = Identity(user_id=user_id, roles=("user",))

    assert identity.is_authenticated is True
    assert identity.current_user_id() == user_id
    assert identity.require_user_id() == user_id


def test__identity__is_immutable() -> None:
    """An identity resolved for a request cannot be re-pointed at another user."""
    identity = Identity(user_id=uuid7())

    with pytest.raises(AttributeError):
        identity.user_id = uuid7()  # type: ignore[misc]


def test__identity__roles_without_user_is_not_authenticated() -> None:
    """Roles alone never authenticate a caller."""
    identity = Identity(roles=("admin",))

    assert identity.is_authenticated is False
    with pytest.raises(UnauthorizedError):
        identity.require_user_id()
