from collections.abc import Callable, Mapping

from todo_service.modules.todo import schemas_todo
from todo_service.modules.todo.types_todo import TodoFilterKind, UpdatedColumn

TodoQuery = Mapping[str, str | None]


def has_priority_and_status(query: TodoQuery) -> bool:
    return query.get("priority") is not None and query.get("status") is not None


def has_priority(query: TodoQuery) -> bool:
    return query.get("priority") is not None


def has_status(query: TodoQuery) -> bool:
    return query.get("status") is not None


# Rules are evaluated in order, the first matching one is used.
# A parameter provided with an empty value is considered present
TODO_FILTER_RULES: list[tuple[Callable[[TodoQuery], bool], TodoFilterKind]] = [
    (has_priority_and_status, TodoFilterKind.priority_and_status),
    (has_priority, TodoFilterKind.priority),
    (has_status, TodoFilterKind.status),
]


def resolve_todo_filter(query: TodoQuery) -> schemas_todo.TodoFilter:
    """
    Select the filters to apply from the query parameters of a list request.

    The search filter `search_q` is always applied and defaults to an empty string, which matches every todo.
    """
    kind = next(
        (kind for rule, kind in TODO_FILTER_RULES if rule(query)),
        TodoFilterKind.none,
    )

    return schemas_todo.TodoFilter(
        kind=kind,
        search_q=query.get("search_q") or "",
        priority=query.get("priority")
        if kind in (TodoFilterKind.priority_and_status, TodoFilterKind.priority)
        else None,
        status=query.get("status")
        if kind in (TodoFilterKind.priority_and_status, TodoFilterKind.status)
        else None,
    )


def resolve_updated_column(todo_edit: schemas_todo.TodoEdit) -> UpdatedColumn | None:
    """
    Return the column reported as updated: the first provided field among status, priority and todo
    """
    for column in UpdatedColumn:
        if getattr(todo_edit, column.name) is not None:
            return column
    return None


def merge_todo_edit(
    todo: schemas_todo.Todo,
    todo_edit: schemas_todo.TodoEdit,
) -> schemas_todo.Todo:
    """
    Return the todo with the provided fields of `todo_edit`, omitted fields keep their current value
    """
    return todo.model_copy(update=todo_edit.model_dump(exclude_none=True))
