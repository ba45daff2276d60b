"""Shared fixtures for API tests."""
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from api.main import app
from core.auth import create_session_token
from core.config import Settings, get_settings
from db.session import get_async_session
from models.user import User

ClientFactory = Callable[[User | None], AbstractAsyncContextManager[AsyncClient]]


@asynccontextmanager
async def create_user_client(
    db_session: AsyncSession,
    user: User | None,
) -> AsyncGenerator[AsyncClient]:
    """
    Create an AsyncClient that authenticates with a real session token.

    Overrides FastAPI dependencies to disable dev_mode. With `user=None` the client
    sends no Authorization header at all. Cleans up dependency overrides on exit.
    """
    get_settings.cache_clear()
    settings = Settings(dev_mode=False)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    def override_get_settings() -> Settings:
        return settings

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = override_get_settings

    headers = {}
    if user is not None:
        token, _ = create_session_token(user, settings)
        headers["Authorization"] = f"Bearer {token}"

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=headers,
        ) as user_client:
            yield user_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client_for(db_session: AsyncSession) -> ClientFactory:
    """Factory for clients authenticated as a given user (or anonymous)."""

    def factory(user: User | None) -> AbstractAsyncContextManager[AsyncClient]:
        return create_user_client(db_session, user)

    return factory


@pytest.fixture
async def anonymous_client(client_for: ClientFactory) -> AsyncGenerator[AsyncClient]:
    """Client that sends no credentials, with DEV_MODE off."""
    async with client_for(None) as anonymous:
        yield anonymous

