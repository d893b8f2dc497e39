import logging

from sqlalchemy import Connection, MetaData
from sqlalchemy.engine import Engine, create_engine

from todo_service.core.utils.config import Settings
from todo_service.types.sqlalchemy import Base
from todo_service.utils.state import get_database_url

# These utils are used at startup to initialize the database


def get_sync_db_engine(settings: Settings) -> Engine:
    """
    Create a synchronous database engine
    """
    return create_engine(
        get_database_url(settings, sync=True),
        echo=settings.DATABASE_DEBUG,
    )


def drop_db_sync(conn: Connection) -> None:
    """
    Drop all tables in the database
    """
    # `Base.metadata.drop_all(conn)` is only able to drop tables that are defined in models
    # We construct a metadata object that reflects the database instead of only using models
    my_metadata: MetaData = MetaData(schema=Base.metadata.schema)
    my_metadata.reflect(bind=conn, resolve_fks=False)
    my_metadata.drop_all(bind=conn)


def create_db_tables(
    sync_engine: Engine,
    todo_error_logger: logging.Logger,
    drop_db: bool = False,
) -> None:
    """
    Create the tables missing from the database.
    Existing tables are left untouched: there is no migration system.

    if drop_db is True, we will drop all tables before creating them again

    This method requires a synchronous engine
    """
    try:
        with sync_engine.begin() as conn:
            if drop_db:
                todo_error_logger.info("Startup: Dropping all database tables")
                drop_db_sync(conn)

            Base.metadata.create_all(conn)
            todo_error_logger.info("Startup: Database tables created")
    except Exception as error:
        todo_error_logger.critical(
            f"Startup: Could not create tables in the database: {error}",
        )
        raise
    finally:
        sync_engine.dispose()
