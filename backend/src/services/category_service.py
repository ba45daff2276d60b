"""Service layer for category operations."""
import logging
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from models.category import Category, todo_categories
from models.todo import Todo
from services.exceptions import ConflictError, NotFoundError
from services.utils import parse_uuid, require_text

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "A category with this slug already exists"
HAS_TODOS_MESSAGE = "Cannot delete category with existing todos"


async def _slug_taken(
    db: AsyncSession,
    user_id: UUID,
    slug: str,
    exclude_id: UUID | None = None,
) -> bool:
    """Check whether the user already has a category with this slug (exact match)."""
    query = select(Category.id).where(
        Category.user_id == user_id,
        Category.slug == slug,
    )
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def get_category(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
) -> Category | None:
    """Get a category by id, scoped to user."""
    result = await db.execute(
        select(Category)
        .where(
            Category.id == category_id,
            Category.user_id == user_id,
        )
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def create_category(
    db: AsyncSession,
    user_id: UUID,
    name: str | None,
    slug: str | None,
) -> Category:
    """
    Create a new category for a user.

    Args:
        db: Database session.
        user_id: Owner of the new category.
        name: Display name.
        slug: URL-friendly identifier, unique per user (case-sensitive).

    Returns:
        The created category.

    Raises:
        ValidationError: If name or slug is empty or too long.
        ConflictError: If the user already has a category with this slug.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    limit = get_settings().max_name_length
    name = require_text(name, "name", "Name", max_length=limit)
    slug = require_text(slug, "slug", "Slug", max_length=limit)

    # Early check for a clean error; the unique constraint is the real guarantee
    if await _slug_taken(db, user_id, slug):
        raise ConflictError(SLUG_TAKEN_MESSAGE, field="slug")

    category = Category(user_id=user_id, name=name, slug=slug)
    try:
        async with db.begin_nested():
            db.add(category)
    except IntegrityError as e:
        # Race condition: another request created the slug between check and flush
        raise ConflictError(SLUG_TAKEN_MESSAGE, field="slug") from e
    return category


async def update_category(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
    name: str | None,
    slug: str | None,
) -> Category:
    """
    Rename and re-slug a category.

    The write is a single UPDATE scoped by both id and owner, so a category owned
    by someone else is reported exactly like one that doesn't exist.

    Raises:
        ValidationError: If name or slug is empty or too long.
        ConflictError: If another of the user's categories already has this slug.
        NotFoundError: If no category with this id belongs to the user.
    """
    limit = get_settings().max_name_length
    name = require_text(name, "name", "Name", max_length=limit)
    slug = require_text(slug, "slug", "Slug", max_length=limit)

    if await _slug_taken(db, user_id, slug, exclude_id=category_id):
        raise ConflictError(SLUG_TAKEN_MESSAGE, field="slug")

    try:
        async with db.begin_nested():
            result = await db.execute(
                update(Category)
                .where(
                    Category.id == category_id,
                    Category.user_id == user_id,
                )
                .values(name=name, slug=slug)
                .execution_options(synchronize_session=False),
            )
    except IntegrityError as e:
        raise ConflictError(SLUG_TAKEN_MESSAGE, field="slug") from e

    if result.rowcount == 0:
        raise NotFoundError("Category")

    category = await get_category(db, user_id, category_id)
    if category is None:
        raise NotFoundError("Category")
    return category


async def count_todos_in_category(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
) -> int:
    """Count the user's todos linked to a category."""
    result = await db.execute(
        select(func.count())
        .select_from(todo_categories)
        .join(Todo, Todo.id == todo_categories.c.todo_id)
        .where(
            todo_categories.c.category_id == category_id,
            Todo.user_id == user_id,
        ),
    )
    return result.scalar_one()


async def delete_category(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
) -> None:
    """
    Delete a category that no todo references.

    This is a referential guard, not a cascade: todos are never detached implicitly.

    Raises:
        ConflictError: If any of the user's todos is linked to the category.
        NotFoundError: If no category with this id belongs to the user.
    """
    if await count_todos_in_category(db, user_id, category_id) > 0:
        raise ConflictError(HAS_TODOS_MESSAGE)

    try:
        async with db.begin_nested():
            result = await db.execute(
                delete(Category)
                .where(
                    Category.id == category_id,
                    Category.user_id == user_id,
                )
                .execution_options(synchronize_session=False),
            )
    except IntegrityError as e:
        # A todo was linked between the count and the delete
        raise ConflictError(HAS_TODOS_MESSAGE) from e

    if result.rowcount == 0:
        raise NotFoundError("Category")
    logger.info("Deleted category %s for user %s", category_id, user_id)


async def list_categories(db: AsyncSession, user_id: UUID) -> list[Category]:
    """Get all categories for a user, sorted by name ascending."""
    result = await db.execute(
        select(Category)
        .where(Category.user_id == user_id)
        .order_by(Category.name.asc(), Category.id.asc())
        .execution_options(populate_existing=True),
    )
    return list(result.scalars())


async def get_category_by_id_or_slug(
    db: AsyncSession,
    user_id: UUID,
    identifier: str,
) -> Category | None:
    """
    Look up a category by id or slug, scoped to user.

    Args:
        db: Database session.
        user_id: User ID to scope the category.
        identifier: Either the category's UUID or its slug.

    Returns:
        The first matching category (an id match wins over a slug match), or None.
    """
    category_id = parse_uuid(identifier)
    conditions = [Category.slug == identifier]
    if category_id is not None:
        conditions.append(Category.id == category_id)

    query = select(Category).where(
        Category.user_id == user_id,
        or_(*conditions),
    )
    if category_id is not None:
        query = query.order_by(case((Category.id == category_id, 0), else_=1))

    result = await db.execute(query.limit(1).execution_options(populate_existing=True))
    return result.scalar_one_or_none()
