import logging
from collections.abc import Callable
from functools import lru_cache

from fastapi import FastAPI
from sqlalchemy import NullPool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo_service.core.utils.config import Settings
from todo_service.types.sqlalchemy import Base
from todo_service.utils.state import LifespanState, get_database_url


class FailedToAddObjectToDB(Exception):
    """Exception raised when an object cannot be added to the database."""


@lru_cache
def override_get_settings() -> Settings:
    """Override the get_settings function to use the testing session"""

    return Settings(
        _env_file=None,
        _yaml_file="./tests/config.test.yaml",
    )


settings = override_get_settings()


engine = create_async_engine(
    get_database_url(settings),
    echo=settings.DATABASE_DEBUG,
    # Each connection is bound to the event loop which created it, and tests use more than one loop
    # See https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#using-multiple-asyncio-event-loops
    poolclass=NullPool,
)

TestingSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def init_test_engine() -> AsyncEngine:
    return engine


def init_test_SessionLocal() -> Callable[[], AsyncSession]:
    return TestingSessionLocal


async def override_init_app_state(
    app: FastAPI,
    settings: Settings,
    todo_error_logger: logging.Logger,
) -> LifespanState:
    """
    Initialize the state of the application with the test database engine
    """
    return LifespanState(
        engine=init_test_engine(),
        SessionLocal=init_test_SessionLocal(),
    )


async def add_object_to_db(db_object: Base) -> None:
    """
    Add an object to the database
    """
    async with TestingSessionLocal() as db:
        try:
            db.add(db_object)
            await db.commit()
        except Exception as error:
            await db.rollback()
            raise FailedToAddObjectToDB from error
        finally:
            await db.close()
