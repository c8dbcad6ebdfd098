from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, Query

from ..db import TodoRepository
from ..models import ListQuery
from ..repositories import get_repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

# Bounds of the integer column types: ids are int4, offset/limit are bigint
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_BIGINT_MAX = 2**63 - 1

_ERROR_RESPONSES = {
    400: {"description": "Malformed path, query or body"},
    500: {"description": "Database error; body is the error message as plain text"},
}
_NOT_FOUND_RESPONSE = {404: {"description": "No todo with this id (plain text)"}}


def _get_repo(repo: TodoRepository = Depends(get_repository)) -> TodoRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _todo_id_path():
    return Path(..., ge=_INT_MIN, le=_INT_MAX, description="Identifier of the todo item")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List todos ordered by id.\n\n"
        "Query parameters:\n"
        "- offset: number of items to skip (>=0, default 0)\n"
        "- limit: max number of items to return (>=0, default 0; 0 returns an empty list)\n\n"
        "No total count is returned; a short or empty page marks the end."
    ),
    responses=_ERROR_RESPONSES,
)
async def list_todos(
    offset: int = Query(0, ge=0, le=_BIGINT_MAX, description="Number of items to skip"),
    limit: int = Query(0, ge=0, le=_BIGINT_MAX, description="Maximum number of items to return"),
    repo: TodoRepository = Depends(_get_repo),
) -> List[TodoOut]:
    items = await repo.list(ListQuery(offset=offset, limit=limit))
    return [TodoOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    summary="Create Todo",
    description="Create a new, uncompleted Todo item and return it with its assigned id.",
    responses=_ERROR_RESPONSES,
)
async def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    created = await repo.create(payload.description)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
async def get_todo(todo_id: int = _todo_id_path(), repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    item = await repo.get(todo_id)
    return TodoOut(**item)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Replace Todo",
    description=(
        "Overwrite both fields of a Todo item. An omitted description is stored as an "
        "empty string and an omitted completed flag as false."
    ),
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
async def update_todo(payload: TodoUpdate, todo_id: int = _todo_id_path(), repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    updated = await repo.update(todo_id, description=payload.description, completed=payload.completed)
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID and return the values it had before deletion.",
    responses={**_ERROR_RESPONSES, **_NOT_FOUND_RESPONSE},
)
async def delete_todo(todo_id: int = _todo_id_path(), repo: TodoRepository = Depends(_get_repo)) -> TodoOut:
    """
    Delete a Todo. Returns 200 with the deleted item, 404 if not found.
    """
    deleted = await repo.delete(todo_id)
    return TodoOut(**deleted)
