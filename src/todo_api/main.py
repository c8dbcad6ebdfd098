from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import TodoRepository, build_engine
from .errors import StorageError, TodoNotFoundError
from .log import configure_logging
from .routers import todos as todos_router
from .settings import get_settings

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("todo_api.access")

openapi_tags = [
    {"name": "greeting", "description": "Root greeting endpoint."},
    {"name": "todos", "description": "CRUD operations for Todo items with offset/limit listing."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Build the connection pool once per process and share it with every request
    through app.state; dispose of it on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.repository = TodoRepository(engine)
    logger.info("Database pool ready (pool_size=%d)", settings.db_pool_size)
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database pool closed")


app = FastAPI(
    title="Todo API",
    description="HTTP CRUD service for todo items stored in a relational table.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)


@app.middleware("http")
async def trace_requests(request: Request, call_next) -> Response:
    """Log method, path, status and latency of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    access_logger.debug(
        "%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms
    )
    return response


# Malformed bodies, path or query parameters are rejected with 400
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(TodoNotFoundError)
async def todo_not_found_handler(request: Request, exc: TodoNotFoundError) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=404)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> PlainTextResponse:
    """
    Any other database failure becomes a 500 whose body is the error message.
    The full error, with its cause chain, is logged server-side.
    """
    logger.error("Unhandled error: %r", exc, exc_info=exc)
    return PlainTextResponse(str(exc), status_code=500)


@app.exception_handler(StarletteHTTPException)
async def route_not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Unmatched paths, and known paths hit with an unsupported method, get a
    plain 404 "Not Found".
    """
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


# PUBLIC_INTERFACE
@app.get("/", summary="Greeting", tags=["greeting"], response_class=PlainTextResponse)
async def hello() -> str:
    """
    Root endpoint.

    Returns:
        A plain text greeting.
    """
    return "Hello, World!"


# Include routers
app.include_router(todos_router.router)
