import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Path
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from todo_service.dependencies import get_db, get_request_id
from todo_service.modules.todo import cruds_todo, schemas_todo, utils_todo
from todo_service.types.exceptions import TodoAlreadyExistsError
from todo_service.types.module import Module
from todo_service.types.sqlalchemy import INTEGER_MAX, INTEGER_MIN

todo_logger = logging.getLogger("todo_service.todo")

# Ids out of the column range are rejected before reaching the database
TodoId = Annotated[int, Path(ge=INTEGER_MIN, le=INTEGER_MAX)]

module = Module(
    root="todo",
    tag="Todo",
)


@module.router.get(
    "/todos/",
    response_model=list[schemas_todo.Todo],
    status_code=200,
)
async def get_todos(
    search_q: str | None = None,
    priority: str | None = None,
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Get todos whose description contains `search_q`.

    If `priority` and/or `status` are provided, only todos having exactly these values are returned.
    An empty value is still used as a filter.
    """
    todo_filter = utils_todo.resolve_todo_filter(
        {
            "search_q": search_q,
            "priority": priority,
            "status": status,
        },
    )

    return await cruds_todo.get_todos(todo_filter=todo_filter, db=db)


@module.router.get(
    "/todos/{todo_id}/",
    response_model=schemas_todo.Todo,
    status_code=200,
)
async def get_todo_by_id(
    todo_id: TodoId,
    db: AsyncSession = Depends(get_db),
):
    todo = await cruds_todo.get_todo_by_id(todo_id=todo_id, db=db)
    if todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")

    return todo


@module.router.post(
    "/todos/",
    response_class=PlainTextResponse,
    status_code=200,
)
async def create_todo(
    todo: schemas_todo.Todo,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    Create a todo. The id is chosen by the client and must not be already used.
    """
    try:
        await cruds_todo.create_todo(todo=todo, db=db)
    except TodoAlreadyExistsError as error:
        raise HTTPException(
            status_code=409,
            detail="A todo with this id already exists",
        ) from error

    todo_logger.info(
        f"Todo {todo.id} created with priority {todo.priority} and status {todo.status} ({request_id})",
    )
    return "Todo Successfully Added"


@module.router.put(
    "/todos/{todo_id}/",
    response_class=PlainTextResponse,
    status_code=200,
)
async def update_todo(
    todo_id: TodoId,
    todo_edit: schemas_todo.TodoEdit,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    Update a todo. Omitted fields keep their current value.

    The response names a single updated column, checked in this order: status, priority, todo.
    """
    updated_column = utils_todo.resolve_updated_column(todo_edit)
    if updated_column is None:
        raise HTTPException(status_code=400, detail="No field to update")

    # NOTE: the todo may be modified by another request between this read and the following write
    existing_todo = await cruds_todo.get_todo_by_id(todo_id=todo_id, db=db)
    if existing_todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")

    todo = utils_todo.merge_todo_edit(
        todo=schemas_todo.Todo.model_validate(existing_todo),
        todo_edit=todo_edit,
    )
    await cruds_todo.update_todo(todo_id=todo_id, todo=todo, db=db)

    todo_logger.info(
        f"Todo {todo_id} updated: {updated_column.value} ({request_id})",
    )
    return f"{updated_column.value} Updated"


@module.router.delete(
    "/todos/{todo_id}/",
    response_class=PlainTextResponse,
    status_code=200,
)
async def delete_todo(
    todo_id: TodoId,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
):
    """
    Delete a todo. Deleting a todo which does not exist is not an error.
    """
    await cruds_todo.delete_todo(todo_id=todo_id, db=db)

    todo_logger.info(f"Todo {todo_id} deleted ({request_id})")
    return "Todo Deleted"
