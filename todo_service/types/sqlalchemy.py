from collections.abc import Callable
from typing import Annotated

from sqlalchemy import types
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, mapped_column

# Pre-configured field type for caller-supplied integer primary keys (see https://docs.sqlalchemy.org/en/20/orm/declarative_tables.html#mapping-whole-column-declarations-to-python-types)
IntegerPrimaryKey = Annotated[int, mapped_column(primary_key=True, autoincrement=False)]

SessionLocalType = Callable[[], AsyncSession]

# Range of the SQL `INTEGER` type on every supported database (32 bits on Postgresql)
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


class Base(MappedAsDataclass, DeclarativeBase):
    """Base class for all models.

    The type map is overriden so that every annotated column gets an explicit SQL type (see https://docs.sqlalchemy.org/en/20/orm/declarative_tables.html#customizing-the-type-map)"""

    type_annotation_map = {
        bool: types.Boolean(),
        int: types.Integer(),
        str: types.String(),
    }
