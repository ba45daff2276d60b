"""Sign-in endpoint issuing session tokens."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.auth import create_session_token
from core.config import Settings
from schemas.user import SignInRequest, TokenResponse
from services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    credentials: SignInRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """
    Sign in with email and password.

    An email that has never been seen creates a new account with that password.
    Returns 401 if the password is wrong or the account is inactive.
    """
    user = await user_service.sign_in_email_password(
        db, credentials.email, credentials.password, settings.bcrypt_rounds,
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token, expires_at = create_session_token(user, settings)
    return TokenResponse(access_token=token, expires_at=expires_at)
