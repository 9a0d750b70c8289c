"""FastAPI dependencies.

The storage lives on ``app.state`` and every component is built per request
around it, so tests can hand the app an isolated store.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from common.config import Settings
from ..infrastructure.persistence import LogStorage
from ..ingest import IngestHandler
from ..metrics import MetricsAggregator
from ..queries import LogQueryEngine


def get_storage(request: Request) -> LogStorage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Service unavailable: storage not initialized")
    return storage


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_ingest_handler(request: Request) -> IngestHandler:
    return IngestHandler(get_storage(request))


def get_query_engine(request: Request) -> LogQueryEngine:
    settings = get_settings_from_app(request)
    return LogQueryEngine(
        get_storage(request),
        default_limit=settings.default_limit,
        max_limit=settings.max_limit,
    )


def get_metrics_aggregator(request: Request) -> MetricsAggregator:
    return MetricsAggregator(get_storage(request))
