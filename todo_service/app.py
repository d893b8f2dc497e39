"""File creating the application, initializing the database tables and calling the router"""

import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError

from todo_service import api
from todo_service.core.utils.config import Settings
from todo_service.core.utils.log import LogConfig
from todo_service.dependencies import disconnect_state, init_app_state
from todo_service.utils import initialization
from todo_service.utils.state import LifespanState

# NOTE: We can not get loggers at the top of this file like we do in other files
# as the loggers are not yet initialized


def init_db(
    settings: Settings,
    todo_error_logger: logging.Logger,
    drop_db: bool = False,
) -> None:
    """
    Init the database by creating the tables

    The method will use a synchronous engine to create the tables
    """
    sync_engine = initialization.get_sync_db_engine(settings=settings)

    initialization.create_db_tables(
        sync_engine=sync_engine,
        todo_error_logger=todo_error_logger,
        drop_db=drop_db,
    )


def generate_operation_id(route: APIRoute) -> str:
    """
    Simplify operation IDs so that generated API clients have simpler function names.

    The operation_id will have the format "method_path", like "get_todos_".
    FastAPI calls this function for every route when the route is registered.

    See https://fastapi.tiangolo.com/advanced/generate-clients/#custom-generate-unique-id-function
    """
    method = "_".join(sorted(route.methods))
    return method.lower() + route.path.replace("/", "_")


# We wrap the application in a function to be able to pass the settings and drop_db parameters
# The drop_db parameter is used to drop the database tables before creating them again
def get_application(settings: Settings, drop_db: bool = False) -> FastAPI:
    # Initialize loggers
    LogConfig().initialize_loggers(settings=settings)

    todo_access_logger = logging.getLogger("todo_service.access")
    todo_error_logger = logging.getLogger("todo_service.error")

    # Creating a lifespan which will be called when the application starts then shuts down
    # https://fastapi.tiangolo.com/advanced/events/
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[LifespanState, None]:
        todo_error_logger.info("Startup: Initializing application")

        # A database which can not be opened stops the startup, Uvicorn then exits with a non-zero status
        init_db(
            settings=settings,
            todo_error_logger=todo_error_logger,
            drop_db=drop_db,
        )

        state: LifespanState = await app.dependency_overrides.get(
            init_app_state,
            init_app_state,
        )(
            app=app,
            settings=settings,
            todo_error_logger=todo_error_logger,
        )

        yield state

        todo_error_logger.info("Shutting down")
        await app.dependency_overrides.get(
            disconnect_state,
            disconnect_state,
        )(
            state=state,
            todo_error_logger=todo_error_logger,
        )

    app = FastAPI(
        title="Todo Service",
        version=settings.TODO_SERVICE_VERSION,
        lifespan=lifespan,
        generate_unique_id_function=generate_operation_id,
    )
    app.include_router(api.api_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """
        This middleware is called around each request.
        It logs the request and inject a unique identifier in the request that should be used to associate logs saved during the request.
        """
        # We generate a unique identifier for the request and save it as a state.
        # https://www.starlette.io/requests/#other-state
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        if request.client is None:
            todo_error_logger.warning(
                f"Client information not available for {request.url.path}",
            )
            raise HTTPException(status_code=400, detail="No client information")

        client_address = f"{request.client.host}:{request.client.port}"

        response = await call_next(request)

        todo_access_logger.info(
            f'{client_address} - "{request.method} {request.url.path}" {response.status_code} ({request_id})',
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ):
        # We use a Debug logger to log the error as personal data may be present in the request
        todo_error_logger.debug(
            f"Validation error: {exc.errors()} ({request.state.request_id})",
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder({"detail": exc.errors(), "body": exc.body}),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ):
        todo_error_logger.error(
            f'Database error during "{request.method} {request.url.path}": {exc} ({request.state.request_id})',
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )

    return app
