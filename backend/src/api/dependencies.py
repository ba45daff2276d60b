"""FastAPI dependencies for injection."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import (
    get_current_user,
    get_current_user_id,
    resolve_identity,
)
from core.config import get_settings
from core.identity import Identity
from db.session import get_async_session
from services.todo_facade import TodoFacade


async def get_todo_facade(
    db: AsyncSession = Depends(get_async_session),
    identity: Identity = Depends(resolve_identity),
) -> TodoFacade:
    """Build the query facade for the current request's identity."""
    return TodoFacade(db, identity)


__all__ = [
    "get_async_session",
    "get_current_user",
    "get_current_user_id",
    "get_settings",
    "get_todo_facade",
    "resolve_identity",
]
