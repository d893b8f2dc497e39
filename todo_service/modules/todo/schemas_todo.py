from pydantic import BaseModel, ConfigDict, Field

from todo_service.modules.todo.types_todo import TodoFilterKind
from todo_service.types.sqlalchemy import INTEGER_MAX, INTEGER_MIN


class Todo(BaseModel):
    id: int = Field(ge=INTEGER_MIN, le=INTEGER_MAX)
    todo: str
    priority: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class TodoEdit(BaseModel):
    """
    A field which is not provided, or provided as `null`, keeps its current value
    """

    todo: str | None = None
    priority: str | None = None
    status: str | None = None


class TodoFilter(BaseModel):
    kind: TodoFilterKind
    search_q: str = ""
    priority: str | None = None
    status: str | None = None
