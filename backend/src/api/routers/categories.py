"""Category management endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_todo_facade
from api.helpers import raise_for_result
from schemas.category import CategoryResponse, CategoryWrite
from services.todo_facade import TodoFacade

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[CategoryResponse])
async def list_categories(
    facade: TodoFacade = Depends(get_todo_facade),
) -> list[CategoryResponse]:
    """Get all categories for the current user, sorted by name."""
    categories = await facade.list_categories()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryWrite,
    facade: TodoFacade = Depends(get_todo_facade),
) -> CategoryResponse:
    """
    Create a category.

    Returns 422 if name or slug is empty.
    Returns 409 if the current user already has a category with this slug.
    """
    result = await facade.create_category(data.name, data.slug)
    raise_for_result(result)
    return CategoryResponse.model_validate(result.record)


@router.get("/{identifier}", response_model=CategoryResponse)
async def get_category(
    identifier: str,
    facade: TodoFacade = Depends(get_todo_facade),
) -> CategoryResponse:
    """Get a category by id or slug."""
    category = await facade.get_category(identifier)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryWrite,
    facade: TodoFacade = Depends(get_todo_facade),
) -> CategoryResponse:
    """
    Rename and re-slug a category.

    Returns 404 if the category doesn't exist or belongs to another user.
    Returns 409 if another of the user's categories already has this slug.
    """
    result = await facade.update_category(category_id, data.name, data.slug)
    raise_for_result(result)
    return CategoryResponse.model_validate(result.record)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    facade: TodoFacade = Depends(get_todo_facade),
) -> None:
    """
    Delete a category.

    Returns 409 if any todo is still in the category (remove it from those todos,
    or delete them, first). Returns 404 if the category doesn't exist.
    """
    result = await facade.delete_category(category_id)
    raise_for_result(result)
