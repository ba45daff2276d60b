"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.category import Category, todo_categories  # Must be before todo due to import
from models.todo import Todo
from models.user import User

__all__ = [
    "Base",
    "Category",
    "TimestampMixin",
    "Todo",
    "UUIDv7Mixin",
    "User",
    "todo_categories",
]
