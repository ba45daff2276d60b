"""Pydantic schemas for category endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CategoryWrite(BaseModel):
    """
    Schema for creating or updating a category.

    Emptiness and length limits are checked by the service layer so they can be
    reported per field.
    """

    name: str = ""
    slug: str = ""


class CategoryResponse(BaseModel):
    """Schema for a category."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime
