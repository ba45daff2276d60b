"""
Identity-gated entry point for todo and category operations.

Every method resolves the current user before anything else. With no user,
UnauthorizedError is raised and the database is never touched. Repositories
(category_service, todo_service) only ever receive an owner id that came from here.
"""
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.identity import Identity
from models.category import Category
from models.todo import Todo
from services import category_service, todo_service
from services.exceptions import OperationError, StorageError
from services.results import ActionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TodoFacade:
    """Todo and category operations for one request's identity."""

    def __init__(self, db: AsyncSession, identity: Identity) -> None:
        self.db = db
        self.identity = identity

    def _owner_id(self) -> UUID:
        return self.identity.require_user_id()

    async def _read(self, operation: Awaitable[T], description: str) -> T:
        try:
            return await operation
        except SQLAlchemyError as e:
            logger.exception("Storage failure while %s", description)
            raise StorageError() from e

    async def _perform(
        self,
        operation: Awaitable[T],
        message: str,
        description: str,
    ) -> ActionResult[T]:
        try:
            record = await operation
        except OperationError as e:
            logger.debug("%s rejected: %s", description, e)
            return ActionResult.failure(e)
        except SQLAlchemyError as e:
            logger.exception("Storage failure while %s", description)
            raise StorageError() from e
        return ActionResult.success(message, record)

    # --- Reads ---

    async def list_todos(self, category: str | None = None) -> list[Todo]:
        """All of the user's todos, or only those in a category (by id or slug)."""
        owner_id = self._owner_id()
        return await self._read(
            todo_service.list_todos(self.db, owner_id, category),
            "listing todos",
        )

    async def get_todo(self, todo_id: UUID) -> Todo | None:
        """One of the user's todos, or None."""
        owner_id = self._owner_id()
        return await self._read(
            todo_service.get_todo(self.db, owner_id, todo_id),
            "fetching a todo",
        )

    async def list_categories(self) -> list[Category]:
        """All of the user's categories, sorted by name."""
        owner_id = self._owner_id()
        return await self._read(
            category_service.list_categories(self.db, owner_id),
            "listing categories",
        )

    async def get_category(self, identifier: str) -> Category | None:
        """One of the user's categories by id or slug, or None."""
        owner_id = self._owner_id()
        return await self._read(
            category_service.get_category_by_id_or_slug(self.db, owner_id, identifier),
            "fetching a category",
        )

    # --- Category mutations ---

    async def create_category(
        self, name: str | None, slug: str | None,
    ) -> ActionResult[Category]:
        """Create a category for the current user."""
        owner_id = self._owner_id()
        return await self._perform(
            category_service.create_category(self.db, owner_id, name, slug),
            "Category created",
            "creating a category",
        )

    async def update_category(
        self, category_id: UUID, name: str | None, slug: str | None,
    ) -> ActionResult[Category]:
        """Rename/re-slug one of the current user's categories."""
        owner_id = self._owner_id()
        return await self._perform(
            category_service.update_category(self.db, owner_id, category_id, name, slug),
            "Category updated",
            "updating a category",
        )

    async def delete_category(self, category_id: UUID) -> ActionResult[None]:
        """Delete one of the current user's categories if no todo uses it."""
        owner_id = self._owner_id()
        return await self._perform(
            category_service.delete_category(self.db, owner_id, category_id),
            "Category deleted",
            "deleting a category",
        )

    # --- Todo mutations ---

    async def create_todo(
        self, title: str | None, category_ids: Sequence[UUID] = (),
    ) -> ActionResult[Todo]:
        """Create a todo for the current user."""
        owner_id = self._owner_id()
        return await self._perform(
            todo_service.create_todo(self.db, owner_id, title, category_ids),
            "Todo created",
            "creating a todo",
        )

    async def update_todo(
        self, todo_id: UUID, title: str | None, category_ids: Sequence[UUID] = (),
    ) -> ActionResult[Todo]:
        """Update a todo's title and replace its categories."""
        owner_id = self._owner_id()
        return await self._perform(
            todo_service.update_todo(self.db, owner_id, todo_id, title, category_ids),
            "Todo updated",
            "updating a todo",
        )

    async def toggle_todo(self, todo_id: UUID, completed: bool) -> ActionResult[Todo]:
        """Set a todo's completion flag to `completed`."""
        owner_id = self._owner_id()
        return await self._perform(
            todo_service.set_todo_completed(self.db, owner_id, todo_id, completed),
            "Todo updated",
            "toggling a todo",
        )

    async def delete_todo(self, todo_id: UUID) -> ActionResult[None]:
        """Delete one of the current user's todos."""
        owner_id = self._owner_id()
        return await self._perform(
            todo_service.delete_todo(self.db, owner_id, todo_id),
            "Todo deleted",
            "deleting a todo",
        )
