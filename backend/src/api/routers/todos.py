"""Todo management endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_todo_facade
from api.helpers import raise_for_result
from schemas.todo import TodoCompletionUpdate, TodoResponse, TodoWrite
from services.todo_facade import TodoFacade

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("/", response_model=list[TodoResponse])
async def list_todos(
    category: str | None = Query(
        default=None,
        description="Only todos in this category (id or slug).",
    ),
    facade: TodoFacade = Depends(get_todo_facade),
) -> list[TodoResponse]:
    """
    Get the current user's todos.

    Pending todos come before completed ones; within each group, newest first.
    """
    todos = await facade.list_todos(category)
    return [TodoResponse.model_validate(t) for t in todos]


@router.post("/", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    data: TodoWrite,
    facade: TodoFacade = Depends(get_todo_facade),
) -> TodoResponse:
    """
    Create a todo.

    Returns 422 if the title is empty or a category id isn't one of the user's.
    """
    result = await facade.create_todo(data.title, data.category_ids)
    raise_for_result(result)
    return TodoResponse.model_validate(result.record)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: UUID,
    facade: TodoFacade = Depends(get_todo_facade),
) -> TodoResponse:
    """Get a single todo by ID."""
    todo = await facade.get_todo(todo_id)
    if todo is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return TodoResponse.model_validate(todo)


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: UUID,
    data: TodoWrite,
    facade: TodoFacade = Depends(get_todo_facade),
) -> TodoResponse:
    """
    Update a todo's title and categories.

    `category_ids` replaces the existing categories; omitted ones are detached.
    """
    result = await facade.update_todo(todo_id, data.title, data.category_ids)
    raise_for_result(result)
    return TodoResponse.model_validate(result.record)


@router.post("/{todo_id}/completion", response_model=TodoResponse)
async def set_todo_completion(
    todo_id: UUID,
    data: TodoCompletionUpdate,
    facade: TodoFacade = Depends(get_todo_facade),
) -> TodoResponse:
    """Mark a todo completed or pending."""
    result = await facade.toggle_todo(todo_id, data.completed)
    raise_for_result(result)
    return TodoResponse.model_validate(result.record)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: UUID,
    facade: TodoFacade = Depends(get_todo_facade),
) -> None:
    """Delete a todo."""
    result = await facade.delete_todo(todo_id)
    raise_for_result(result)
