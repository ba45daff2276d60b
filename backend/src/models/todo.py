"""Todo model for storing user todos."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.category import Category, todo_categories

if TYPE_CHECKING:
    from models.user import User


class Todo(Base, UUIDv7Mixin, TimestampMixin):
    """Todo model - a titled item that is either pending or completed."""

    __tablename__ = "todos"
    __table_args__ = (
        # Matches the fixed listing order: pending first, newest first
        Index("ix_todos_user_id_completed_created_at", "user_id", "completed", "created_at"),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )

    user: Mapped["User"] = relationship(back_populates="todos")
    categories: Mapped[list[Category]] = relationship(
        secondary=todo_categories,
        order_by=Category.name,
    )
