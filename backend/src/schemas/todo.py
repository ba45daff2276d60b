"""Pydantic schemas for todo endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from schemas.category import CategoryResponse


class TodoWrite(BaseModel):
    """
    Schema for creating or updating a todo.

    On update, `category_ids` replaces the todo's categories entirely; an empty
    list detaches all of them. Title length is limited by MAX_TITLE_LENGTH and
    checked by the service layer.
    """

    title: str = ""
    category_ids: list[UUID] = Field(default_factory=list)


class TodoCompletionUpdate(BaseModel):
    """Schema for setting a todo's completion flag."""

    completed: bool


class TodoResponse(BaseModel):
    """Schema for a todo with its categories."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    completed: bool
    categories: list[CategoryResponse]
    created_at: datetime
    updated_at: datetime
