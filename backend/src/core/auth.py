"""Authentication: session token issuing and per-request identity resolution."""
import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.identity import ANONYMOUS, Identity
from db.session import get_async_session
from models.user import User
from services import user_service
from services.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)

SESSION_TOKEN_ALGORITHM = "HS256"
SESSION_TOKEN_ISSUER = "todo-categories-api"

DEV_USER_EMAIL = "dev@localhost"


def create_session_token(user: User, settings: Settings) -> tuple[str, datetime]:
    """
    Issue a signed session token for a user.

    Returns:
        Tuple of (token, expiry time).
    """
    now = datetime.now(UTC)
    expires_at = now + timedelta(minutes=settings.session_ttl_minutes)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "roles": list(user.roles),
        "iss": SESSION_TOKEN_ISSUER,
        "iat": now,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=SESSION_TOKEN_ALGORITHM)
    return token, expires_at


def decode_session_token(token: str, settings: Settings) -> dict | None:
    """
    Decode and validate a session token.

    Returns:
        The token claims, or None if the token is expired, tampered with, or malformed.
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[SESSION_TOKEN_ALGORITHM],
            issuer=SESSION_TOKEN_ISSUER,
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired session token")
        return None
    except jwt.PyJWTError as e:
        # Log full details for debugging (server-side only)
        logger.warning("Session token validation failed: %s", e)
        return None


def identity_from_claims(claims: dict | None) -> Identity:
    """Turn decoded token claims into an Identity (anonymous if unusable)."""
    if not claims:
        return ANONYMOUS
    try:
        user_id = UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        logger.warning("Session token has an invalid sub claim")
        return ANONYMOUS
    roles = claims.get("roles") or []
    return Identity(user_id=user_id, roles=tuple(str(role) for role in roles))


async def get_or_create_dev_user(db: AsyncSession) -> User:
    """Get or create a development user for DEV_MODE."""
    return await user_service.get_or_create_external_user(
        db,
        email=DEV_USER_EMAIL,
        name="Developer",
    )


async def resolve_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Dependency that resolves the caller to an Identity.

    Never raises for missing or bad credentials: those resolve to ANONYMOUS and the
    query facade decides what anonymous callers may do (nothing). The user row is
    only read once a token's signature and expiry verify; a token whose user has
    since been deleted or deactivated resolves to ANONYMOUS.

    In DEV_MODE, bypasses auth and returns the development user.
    """
    if settings.dev_mode:
        user = await get_or_create_dev_user(db)
        return Identity(user_id=user.id, roles=tuple(user.roles))

    if credentials is None:
        return ANONYMOUS

    identity = identity_from_claims(decode_session_token(credentials.credentials, settings))
    if not identity.is_authenticated:
        return identity

    user = await user_service.get_user(db, identity.user_id)
    if user is None or not user.is_active:
        logger.info("Session token for missing or inactive user %s", identity.user_id)
        return ANONYMOUS
    return Identity(user_id=user.id, roles=tuple(user.roles))


async def get_current_user_id(
    identity: Identity = Depends(resolve_identity),
) -> UUID:
    """
    Dependency that requires an authenticated caller.

    Raises:
        UnauthorizedError: If no user was resolved (rendered as 401).
    """
    return identity.require_user_id()


async def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Dependency that loads the authenticated user's row.

    A token for a user that has since been deleted or deactivated is treated as
    unauthenticated.
    """
    user = await user_service.get_user(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError()
    return user
