"""User model for storing authenticated users."""
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.category import Category
    from models.todo import Todo


DEFAULT_ROLES = ["user"]


def default_roles() -> list[str]:
    """Return a fresh copy of the default role list."""
    return list(DEFAULT_ROLES)


class User(Base, UUIDv7Mixin, TimestampMixin):
    """
    User model - owns todos and categories.

    Users created through credential sign-in carry a bcrypt password hash. Users
    created by an external identity provider (or the DEV_MODE user) have none and
    cannot sign in with a password.
    """

    __tablename__ = "users"

    # id provided by UUIDv7Mixin
    email: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt hash; NULL for externally authenticated users",
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        comment="Avatar URL",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )
    roles: Mapped[list[str]] = mapped_column(
        JSON,
        default=default_roles,
        nullable=False,
    )

    # Rows are removed by ON DELETE CASCADE; the ORM never loads them to delete them.
    categories: Mapped[list["Category"]] = relationship(
        back_populates="user",
        passive_deletes=True,
    )
    todos: Mapped[list["Todo"]] = relationship(
        back_populates="user",
        passive_deletes=True,
    )

    @property
    def has_password(self) -> bool:
        """True for users who can sign in with email and password."""
        return self.password_hash is not None
