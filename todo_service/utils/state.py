from typing import TypedDict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo_service.core.utils.config import Settings
from todo_service.types.sqlalchemy import SessionLocalType


class LifespanState(TypedDict):
    """
    The LifespanState is yielded by the application lifespan.
    Starlette copies it into the state of every request. Use dependencies to access it.
    """

    # Database engine
    engine: AsyncEngine
    # Database session creator
    SessionLocal: SessionLocalType


class RuntimeLifespanState(LifespanState):
    """
    Requests contains an extended version of the LifespanState for each request.
    """

    request_id: str


def get_database_url(settings: Settings, sync: bool = False) -> str:
    if settings.SQLITE_DB:
        driver = "sqlite" if sync else "sqlite+aiosqlite"
        return f"{driver}:///./{settings.SQLITE_DB}"

    driver = "postgresql+psycopg" if sync else "postgresql+asyncpg"
    return f"{driver}://{settings.POSTGRES_USER}:{settings.POSTGRES_PASSWORD}@{settings.POSTGRES_HOST}/{settings.POSTGRES_DB}"


def init_engine(settings: Settings) -> AsyncEngine:
    """
    Return the (asynchronous) database engine based on the settings
    """
    return create_async_engine(
        get_database_url(settings),
        echo=settings.DATABASE_DEBUG,
    )


def init_SessionLocal(engine: AsyncEngine) -> SessionLocalType:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def disconnect_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
