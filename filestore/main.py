"""Entry point for the files API server."""

import sqlite3
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import redis
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from filestore.config import FILES_HOST, FILES_PORT
from filestore.container import ServiceContainer, container_from_config
from filestore.exceptions import (
    FilesManagerError,
    NotFoundError,
    UnauthorizedError,
    UserAlreadyExistsError,
    ValidationError,
)
from filestore.routes import auth_router, file_router, status_router, user_router
from filestore.schemas.common import ErrorResponse

logger = setup_logging('filestore')

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time
    user_id = getattr(request.state, 'user_id', None)

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s "
        f"[request_id={request_id}] [user_id={user_id or 'anonymous'}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    logger.warning(f"Unauthorized: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return _error(status.HTTP_401_UNAUTHORIZED, str(exc))


async def validation_handler(request: Request, exc: ValidationError):
    logger.warning(f"Validation error: {exc} [request_id={_request_id(request)}] path={request.url.path}")
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    logger.warning(f"User already exists: [request_id={_request_id(request)}] path={request.url.path}")
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"Not found: [request_id={_request_id(request)}] path={request.url.path}")
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Malformed request: {exc.errors()} [request_id={_request_id(request)}] path={request.url.path}"
    )
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")


async def internal_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Internal error: {exc} [request_id={_request_id(request)}] path={request.url.path}",
        exc_info=exc
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built services; built from environment configuration at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Files service starting up...")
        if getattr(app.state, 'container', None) is None:
            app.state.container = container_from_config()

        app.state.container.database.init_schema()
        app.state.container.blobs.ensure_root()
        logger.info("Stores initialized")

        yield

        logger.info("Files service shutting down...")

    app = FastAPI(
        title="Files Manager",
        description="Multi-user file storage with public sharing and image thumbnails",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.container = container

    app.middleware("http")(log_requests)

    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(UserAlreadyExistsError, user_already_exists_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(FilesManagerError, internal_error_handler)
    app.add_exception_handler(sqlite3.Error, internal_error_handler)
    app.add_exception_handler(redis.RedisError, internal_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(status_router)
    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(file_router)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "filestore.main:app",
        host=FILES_HOST,
        port=FILES_PORT,
    )


if __name__ == "__main__":
    main()
