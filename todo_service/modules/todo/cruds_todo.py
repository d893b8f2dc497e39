from collections.abc import Sequence

from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_service.modules.todo import models_todo, schemas_todo
from todo_service.modules.todo.types_todo import TodoFilterKind
from todo_service.types.exceptions import TodoAlreadyExistsError


async def get_todos(
    todo_filter: schemas_todo.TodoFilter,
    db: AsyncSession,
) -> Sequence[models_todo.Todo]:
    # The search string is escaped so that `%` and `_` are matched literally
    conditions = [
        models_todo.Todo.todo.contains(todo_filter.search_q, autoescape=True),
    ]
    if todo_filter.kind in (
        TodoFilterKind.priority_and_status,
        TodoFilterKind.priority,
    ):
        conditions.append(models_todo.Todo.priority == todo_filter.priority)
    if todo_filter.kind in (
        TodoFilterKind.priority_and_status,
        TodoFilterKind.status,
    ):
        conditions.append(models_todo.Todo.status == todo_filter.status)

    result = await db.execute(
        select(models_todo.Todo)
        .where(and_(*conditions))
        .order_by(models_todo.Todo.id),
    )
    return result.scalars().all()


async def get_todo_by_id(
    todo_id: int,
    db: AsyncSession,
) -> models_todo.Todo | None:
    result = await db.execute(
        select(models_todo.Todo).where(models_todo.Todo.id == todo_id),
    )
    return result.scalars().first()


async def create_todo(
    todo: schemas_todo.Todo,
    db: AsyncSession,
) -> None:
    db.add(
        models_todo.Todo(
            id=todo.id,
            todo=todo.todo,
            priority=todo.priority,
            status=todo.status,
        ),
    )
    try:
        await db.flush()
    except IntegrityError as error:
        await db.rollback()
        raise TodoAlreadyExistsError(todo.id) from error


async def update_todo(
    todo_id: int,
    todo: schemas_todo.Todo,
    db: AsyncSession,
) -> None:
    # Every column is written, even the ones which did not change
    await db.execute(
        update(models_todo.Todo)
        .where(models_todo.Todo.id == todo_id)
        .values(
            todo=todo.todo,
            priority=todo.priority,
            status=todo.status,
        ),
    )


async def delete_todo(
    todo_id: int,
    db: AsyncSession,
) -> None:
    await db.execute(
        delete(models_todo.Todo).where(models_todo.Todo.id == todo_id),
    )
