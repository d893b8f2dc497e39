from enum import Enum


class TodoFilterKind(str, Enum):
    """
    Combination of filters applied to a list of todos, in addition to the search filter
    """

    priority_and_status = "priority_and_status"
    priority = "priority"
    status = "status"
    none = "none"


class UpdatedColumn(str, Enum):
    """
    Column reported by an update.

    The declaration order is the order in which the fields of the request body are checked:
    when several fields are updated, only the first one is reported.
    """

    status = "Status"
    priority = "Priority"
    todo = "Todo"
