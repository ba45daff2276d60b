"""Pydantic schemas for user and sign-in endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SignInRequest(BaseModel):
    """Schema for email/password sign-in."""

    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=128)


class TokenResponse(BaseModel):
    """Schema for an issued session token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class UserResponse(BaseModel):
    """Schema for the current user's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None
    name: str | None
    image: str | None
    roles: list[str]
    is_active: bool
    has_password: bool


class UserProfileUpdate(BaseModel):
    """Schema for updating the current user's profile. All fields optional."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    current_password: str | None = Field(default=None, max_length=128)
    new_password: str | None = Field(default=None, min_length=1, max_length=128)
    image: str | None = Field(default=None, max_length=2048)


class ProfileUpdateResponse(BaseModel):
    """Schema for the result of a profile update."""

    message: str
    user: UserResponse


class AccountDeleteRequest(BaseModel):
    """Schema for confirming account deletion."""

    password: str | None = Field(default=None, max_length=128)
