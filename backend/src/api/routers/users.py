"""Endpoints for the current user's account."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user, get_settings
from api.helpers import http_error
from core.config import Settings
from models.user import User
from schemas.user import (
    AccountDeleteRequest,
    ProfileUpdateResponse,
    UserProfileUpdate,
    UserResponse,
)
from services import user_service
from services.exceptions import OperationError


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> User:
    """Get the current authenticated user's profile."""
    return current_user


@router.patch("/me", response_model=ProfileUpdateResponse)
async def update_me(
    data: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> ProfileUpdateResponse:
    """
    Update the current user's profile.

    Only provided fields that differ are changed. Changing the password requires
    both `current_password` and `new_password`.

    Returns 409 if the new email belongs to another user.
    Returns 422 if the current password is missing or incorrect.
    """
    try:
        user, changed = await user_service.update_profile(
            db,
            current_user.id,
            settings.bcrypt_rounds,
            name=data.name,
            email=data.email,
            current_password=data.current_password,
            new_password=data.new_password,
            image=data.image,
        )
    except OperationError as e:
        raise http_error(e.code, e.message, e.field) from e
    message = "Profile updated successfully" if changed else "No changes to update"
    return ProfileUpdateResponse(message=message, user=UserResponse.model_validate(user))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    data: AccountDeleteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Delete the current user's account with all their todos and categories.

    Accounts with a password must confirm with it (422 if missing or wrong).
    """
    try:
        await user_service.delete_account(db, current_user.id, data.password)
    except OperationError as e:
        raise http_error(e.code, e.message, e.field) from e
