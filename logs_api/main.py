from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from common.config import Settings, get_settings
from common.db import connect_with_retry
from . import __version__
from .core.errors import StorageError, ValidationError
from .endpoints import health_router, logs_router, metrics_router
from .infrastructure.persistence import (
    InMemoryLogStorage,
    LogStorage,
    PostgresLogStorage,
    ensure_schema,
)

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> LogStorage:
    """PostgreSQL when DATABASE_URL is set, otherwise the in-memory store."""
    if not settings.database_url:
        logger.warning(
            "[Startup] DATABASE_URL not configured - using in-memory storage, "
            "logs will NOT survive a restart"
        )
        return InMemoryLogStorage()

    engine = connect_with_retry(settings)
    try:
        ensure_schema(engine)
    except SQLAlchemyError:
        engine.dispose()
        raise
    logger.info("[Startup] PostgreSQL storage ready")
    return PostgresLogStorage(engine)


def _storage_error_detail(exc: StorageError) -> str:
    cause = exc.cause if exc.cause is not None else exc
    detail = f"DB error: {type(cause).__name__}"
    if os.getenv("INGEST_DEBUG_ERRORS", "").strip() == "1":
        detail = f"{detail}: {exc}"
    return detail


def create_app(storage: Optional[LogStorage] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API.

    Args:
        storage: store to use as is (tests). When omitted it is built at
            startup from ``settings`` and disposed at shutdown.
        settings: defaults to ``get_settings()``.
    """
    settings = settings or get_settings()
    owns_storage = storage is None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.storage is None:
            app.state.storage = build_storage(settings)
        yield
        if owns_storage and app.state.storage is not None:
            logger.info("[Shutdown] Closing storage")
            app.state.storage.close()
            app.state.storage = None

    app = FastAPI(title="TideLogs API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Rejected %s %s field=%s reason=%s", request.method, request.url.path, exc.field, exc.message)
        return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})

    # Unparseable or missing JSON never reaches the handler; keep the same 400 shape.
    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        reason = errors[0].get("msg", "invalid request body") if errors else "invalid request body"
        logger.info("Rejected %s %s field=body reason=%s", request.method, request.url.path, reason)
        return JSONResponse(status_code=400, content={"detail": f"body: {reason}", "field": "body"})

    @app.exception_handler(StorageError)
    async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error in %s %s err=%s", request.method, request.url.path, exc)
        status_code = 503 if exc.retryable else 500
        return JSONResponse(status_code=status_code, content={"detail": _storage_error_detail(exc)})

    app.include_router(health_router)
    app.include_router(logs_router)
    app.include_router(metrics_router)

    return app


app = create_app()
