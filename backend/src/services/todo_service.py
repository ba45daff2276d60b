"""Service layer for todo operations."""
import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import get_settings
from models.category import Category, todo_categories
from models.todo import Todo
from services.exceptions import NotFoundError, ValidationError
from services.utils import parse_uuid, require_text

logger = logging.getLogger(__name__)


async def _resolve_categories(
    db: AsyncSession,
    user_id: UUID,
    category_ids: Sequence[UUID],
) -> list[Category]:
    """
    Load the categories to link, requiring every id to belong to the user.

    Duplicate ids are collapsed. An id that doesn't exist or belongs to another
    user fails the whole operation so a todo can never point at a foreign category.

    Raises:
        ValidationError: If any id is not one of the user's categories.
    """
    unique_ids = list(dict.fromkeys(category_ids))
    if not unique_ids:
        return []

    result = await db.execute(
        select(Category).where(
            Category.user_id == user_id,
            Category.id.in_(unique_ids),
        ),
    )
    categories = list(result.scalars())
    if len(categories) != len(unique_ids):
        raise ValidationError("category_ids", "One or more categories were not found")
    return categories


async def get_todo(
    db: AsyncSession,
    user_id: UUID,
    todo_id: UUID,
) -> Todo | None:
    """
    Get a todo by ID, scoped to user, with its categories loaded.

    Always re-reads the row so values changed by bulk UPDATE statements in the same
    session are reflected.
    """
    result = await db.execute(
        select(Todo)
        .options(selectinload(Todo.categories))
        .where(
            Todo.id == todo_id,
            Todo.user_id == user_id,
        )
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def _get_todo_or_raise(db: AsyncSession, user_id: UUID, todo_id: UUID) -> Todo:
    todo = await get_todo(db, user_id, todo_id)
    if todo is None:
        raise NotFoundError("Todo")
    return todo


async def create_todo(
    db: AsyncSession,
    user_id: UUID,
    title: str | None,
    category_ids: Sequence[UUID] = (),
) -> Todo:
    """
    Create a new pending todo for a user.

    Args:
        db: Database session.
        user_id: Owner of the new todo.
        title: Todo title.
        category_ids: Categories to link; may be empty.

    Returns:
        The created todo with its categories loaded.

    Raises:
        ValidationError: If the title is empty or too long, or a category id is not the user's.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    title = require_text(
        title, "title", "Title", max_length=get_settings().max_title_length,
    )
    categories = await _resolve_categories(db, user_id, category_ids)

    todo = Todo(user_id=user_id, title=title, completed=False)
    todo.categories = categories
    db.add(todo)
    await db.flush()
    return await _get_todo_or_raise(db, user_id, todo.id)


async def update_todo(
    db: AsyncSession,
    user_id: UUID,
    todo_id: UUID,
    title: str | None,
    category_ids: Sequence[UUID] = (),
) -> Todo:
    """
    Update a todo's title and replace its categories.

    Category links are replaced wholesale: every existing link is removed, then the
    supplied ids are linked. Omitting a category detaches it.

    Raises:
        ValidationError: If the title is empty or too long, or a category id is not the user's.
        NotFoundError: If no todo with this id belongs to the user.
    """
    title = require_text(
        title, "title", "Title", max_length=get_settings().max_title_length,
    )
    categories = await _resolve_categories(db, user_id, category_ids)

    async with db.begin_nested():
        result = await db.execute(
            update(Todo)
            .where(
                Todo.id == todo_id,
                Todo.user_id == user_id,
            )
            .values(title=title)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            raise NotFoundError("Todo")

        await db.execute(
            delete(todo_categories).where(todo_categories.c.todo_id == todo_id),
        )
        if categories:
            await db.execute(
                insert(todo_categories),
                [{"todo_id": todo_id, "category_id": c.id} for c in categories],
            )

    return await _get_todo_or_raise(db, user_id, todo_id)


async def set_todo_completed(
    db: AsyncSession,
    user_id: UUID,
    todo_id: UUID,
    completed: bool,
) -> Todo:
    """
    Set a todo's completion flag to the given value.

    This is not a flip: callers pass the new state explicitly, so repeating the
    same request leaves the todo unchanged.

    Raises:
        NotFoundError: If no todo with this id belongs to the user.
    """
    result = await db.execute(
        update(Todo)
        .where(
            Todo.id == todo_id,
            Todo.user_id == user_id,
        )
        .values(completed=completed)
        .execution_options(synchronize_session=False),
    )
    if result.rowcount == 0:
        raise NotFoundError("Todo")
    return await _get_todo_or_raise(db, user_id, todo_id)


async def delete_todo(
    db: AsyncSession,
    user_id: UUID,
    todo_id: UUID,
) -> None:
    """
    Permanently delete a todo. Junction table entries cascade automatically.

    Raises:
        NotFoundError: If no todo with this id belongs to the user.
    """
    result = await db.execute(
        delete(Todo)
        .where(
            Todo.id == todo_id,
            Todo.user_id == user_id,
        )
        .execution_options(synchronize_session=False),
    )
    if result.rowcount == 0:
        raise NotFoundError("Todo")
    logger.info("Deleted todo %s for user %s", todo_id, user_id)


async def list_todos(
    db: AsyncSession,
    user_id: UUID,
    category: str | None = None,
) -> list[Todo]:
    """
    Get a user's todos with their categories.

    Args:
        db: Database session.
        user_id: User ID to scope todos.
        category: Optional category filter, matched against category id OR slug.
            When omitted, all of the user's todos are returned.

    Returns:
        Pending todos before completed ones, newest first within each group.
    """
    query = (
        select(Todo)
        .options(selectinload(Todo.categories))
        .where(Todo.user_id == user_id)
    )

    if category:
        matches = [Category.slug == category]
        category_id = parse_uuid(category)
        if category_id is not None:
            matches.append(Category.id == category_id)
        query = query.where(
            Todo.categories.any(and_(Category.user_id == user_id, or_(*matches))),
        )

    query = query.order_by(
        Todo.completed.asc(),
        Todo.created_at.desc(),
        Todo.id.desc(),
    ).execution_options(populate_existing=True)

    result = await db.execute(query)
    return list(result.scalars())
