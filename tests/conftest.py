"""Fixtures compartidas: store en memoria aislado por test."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from common.config import Settings
from logs_api.infrastructure.persistence import InMemoryLogStorage
from logs_api.ingest import IngestHandler
from logs_api.main import create_app
from logs_api.metrics import MetricsAggregator
from logs_api.queries import LogQueryEngine


BASE_TIME = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage() -> InMemoryLogStorage:
    return InMemoryLogStorage()


@pytest.fixture
def handler(storage) -> IngestHandler:
    return IngestHandler(storage)


@pytest.fixture
def query_engine(storage) -> LogQueryEngine:
    return LogQueryEngine(storage)


@pytest.fixture
def aggregator(storage) -> MetricsAggregator:
    return MetricsAggregator(storage)


@pytest.fixture
def settings() -> Settings:
    return Settings(default_limit=100, max_limit=1000)


@pytest.fixture
def client(storage, settings) -> TestClient:
    app = create_app(storage=storage, settings=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_error_payload() -> Dict[str, Any]:
    return {
        "service": "auth-service",
        "level": "ERROR",
        "message": "Failed login",
        "metadata": {"user_id": "456"},
    }


@pytest.fixture
def seeded(handler):
    """Seis registros con event_time conocidos (uno por minuto)."""
    rows = [
        ("auth-service", "INFO", "User login successful"),
        ("auth-service", "ERROR", "Failed login attempt"),
        ("api-gateway", "INFO", "Request processed"),
        ("payment-service", "WARN", "High transaction volume detected"),
        ("database", "ERROR", "Connection timeout"),
        ("auth-service", "INFO", "User logout"),
    ]
    records = []
    for i, (service, level, message) in enumerate(rows):
        records.append(
            handler.ingest(
                {
                    "service": service,
                    "level": level,
                    "message": message,
                    "event_time": BASE_TIME + timedelta(minutes=i),
                }
            )
        )
    return records
