from sqlalchemy.orm import Mapped

from todo_service.types.sqlalchemy import Base, IntegerPrimaryKey


class Todo(Base):
    __tablename__ = "todo"

    # The id is supplied by the client, its uniqueness is only enforced by the primary key
    id: Mapped[IntegerPrimaryKey]
    todo: Mapped[str]
    # Priority (HIGH, MEDIUM, LOW...) and status (TO DO, IN PROGRESS, DONE...) are free text
    priority: Mapped[str]
    status: Mapped[str]
