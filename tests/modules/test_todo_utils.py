import pytest

from todo_service.modules.todo import schemas_todo
from todo_service.modules.todo.types_todo import TodoFilterKind, UpdatedColumn
from todo_service.modules.todo.utils_todo import (
    merge_todo_edit,
    resolve_todo_filter,
    resolve_updated_column,
)


@pytest.mark.parametrize(
    ("query", "expected_kind"),
    [
        ({"priority": "HIGH", "status": "DONE"}, TodoFilterKind.priority_and_status),
        ({"priority": "HIGH"}, TodoFilterKind.priority),
        ({"priority": "HIGH", "status": None}, TodoFilterKind.priority),
        ({"status": "DONE"}, TodoFilterKind.status),
        ({}, TodoFilterKind.none),
        ({"search_q": "milk"}, TodoFilterKind.none),
        ({"priority": "", "status": ""}, TodoFilterKind.priority_and_status),
        ({"status": ""}, TodoFilterKind.status),
    ],
)
def test_resolve_todo_filter_kind(
    query: dict[str, str | None],
    expected_kind: TodoFilterKind,
) -> None:
    assert resolve_todo_filter(query).kind == expected_kind


def test_resolve_todo_filter_keeps_only_applied_values() -> None:
    todo_filter = resolve_todo_filter({"status": "DONE", "search_q": "milk"})

    assert todo_filter == schemas_todo.TodoFilter(
        kind=TodoFilterKind.status,
        search_q="milk",
        priority=None,
        status="DONE",
    )


def test_resolve_todo_filter_search_defaults_to_empty_string() -> None:
    assert resolve_todo_filter({"priority": "LOW"}).search_q == ""
    assert resolve_todo_filter({"search_q": None}).search_q == ""


def test_resolve_todo_filter_values_are_opaque() -> None:
    todo_filter = resolve_todo_filter(
        {"priority": "' OR 1=1 --", "status": "not a status"},
    )

    assert todo_filter.priority == "' OR 1=1 --"
    assert todo_filter.status == "not a status"


@pytest.mark.parametrize(
    ("todo_edit", "expected_column"),
    [
        (schemas_todo.TodoEdit(status="DONE"), UpdatedColumn.status),
        (schemas_todo.TodoEdit(priority="LOW"), UpdatedColumn.priority),
        (schemas_todo.TodoEdit(todo="x"), UpdatedColumn.todo),
        (schemas_todo.TodoEdit(todo="x", priority="LOW"), UpdatedColumn.priority),
        (schemas_todo.TodoEdit(todo="x", status="DONE"), UpdatedColumn.status),
        (
            schemas_todo.TodoEdit(todo="x", priority="LOW", status="DONE"),
            UpdatedColumn.status,
        ),
        (schemas_todo.TodoEdit(), None),
    ],
)
def test_resolve_updated_column(
    todo_edit: schemas_todo.TodoEdit,
    expected_column: UpdatedColumn | None,
) -> None:
    assert resolve_updated_column(todo_edit) == expected_column


def test_merge_todo_edit_keeps_omitted_fields() -> None:
    todo = schemas_todo.Todo(id=1, todo="Buy milk", priority="HIGH", status="TO DO")

    merged = merge_todo_edit(
        todo=todo,
        todo_edit=schemas_todo.TodoEdit(status="DONE", priority=None),
    )

    assert merged == schemas_todo.Todo(
        id=1,
        todo="Buy milk",
        priority="HIGH",
        status="DONE",
    )
    # The original todo is left untouched
    assert todo.status == "TO DO"
