"""
Security test fixtures.

These fixtures enable testing security scenarios like IDOR (Insecure Direct
Object Reference) by creating multiple users and their associated data.

Clients resolve their identity through a dependency override, so each test
client acts as exactly one user regardless of DEV_MODE.
"""
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.category import Category
from models.todo import Todo
from models.user import User


@pytest.fixture
async def user_a(db_session: AsyncSession) -> User:
    """Create the first test user (User A)."""
    user = User(email="user-a@test.com", name="user-a")
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def user_b(db_session: AsyncSession) -> User:
    """Create a second test user (User B) for IDOR testing."""
    user = User(email="user-b@test.com", name="user-b")
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def user_a_category(db_session: AsyncSession, user_a: User) -> Category:
    """Create a category belonging to User A."""
    category = Category(user_id=user_a.id, name="Private", slug="private")
    db_session.add(category)
    await db_session.flush()
    await db_session.refresh(category)
    return category


@pytest.fixture
async def user_a_todo(
    db_session: AsyncSession,
    user_a: User,
    user_a_category: Category,
) -> Todo:
    """Create a todo belonging to User A, filed under User A's category."""
    todo = Todo(user_id=user_a.id, title="User A's private todo")
    todo.categories = [user_a_category]
    db_session.add(todo)
    await db_session.flush()
    return todo


@pytest.fixture
async def client_as_user_b(
    db_session: AsyncSession,
    user_b: User,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client authenticated as User B."""
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from core.auth import resolve_identity
    from core.identity import Identity
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    async def override_resolve_identity() -> Identity:
        return Identity(user_id=user_b.id, roles=("user",))

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[resolve_identity] = override_resolve_identity

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
