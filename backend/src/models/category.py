"""Category model for grouping a user's todos."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Column, ForeignKey, Index, String, Table, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.user import User


# Junction table for the many-to-many relationship between todos and categories.
# Deleting a todo removes its links. Deleting a category that is still linked fails
# (NO ACTION), which backs up the "has dependent todos" check in category_service.
todo_categories = Table(
    "todo_categories",
    Base.metadata,
    Column(
        "todo_id",
        Uuid,
        ForeignKey("todos.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Uuid,
        ForeignKey("categories.id"),
        primary_key=True,
    ),
    # Index for lookups by category (composite PK already indexes todo_id first)
    Index("ix_todo_categories_category_id", "category_id"),
)


class Category(Base, UUIDv7Mixin, TimestampMixin):
    """Category model - slugs are unique per user, not globally."""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_categories_user_id_slug"),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)

    user: Mapped["User"] = relationship(back_populates="categories")
