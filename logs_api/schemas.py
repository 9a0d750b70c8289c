from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from .core.domain import LogRecord
from .metrics import LogMetrics
from .queries import LogPage


class LogEntryOut(BaseModel):
    id: str
    event_time: datetime
    service: str
    level: str
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    ingested_at: datetime

    @classmethod
    def from_record(cls, record: LogRecord) -> "LogEntryOut":
        return cls(**record.to_dict())

    # Legacy names still read by dashboard clients; same values.
    @computed_field
    @property
    def timestamp(self) -> datetime:
        return self.event_time

    @computed_field
    @property
    def created_at(self) -> datetime:
        return self.ingested_at

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "3f2a6c1e-8d7b-4a9e-9c41-0b5e2f7d1a23",
                "event_time": "2026-10-19T08:00:00.123456Z",
                "service": "auth-service",
                "level": "ERROR",
                "message": "Failed login",
                "metadata": {"user_id": "456"},
                "ingested_at": "2026-10-19T08:00:00.200000Z",
            }
        }
    }


class LogPageOut(BaseModel):
    logs: List[LogEntryOut] = Field(default_factory=list)
    total: int = Field(..., description="Matches ignoring limit/offset")
    limit: int
    offset: int

    @classmethod
    def from_page(cls, page: LogPage) -> "LogPageOut":
        return cls(
            logs=[LogEntryOut.from_record(r) for r in page.logs],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
        )


class MetricsOut(BaseModel):
    total_logs: int
    services: Dict[str, int] = Field(default_factory=dict)
    levels: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_metrics(cls, metrics: LogMetrics) -> "MetricsOut":
        return cls(**metrics.to_dict())


class HealthOut(BaseModel):
    status: str  # "healthy" | "degraded"
    timestamp: datetime
    storage: str  # "ok" | "unreachable"
    backend: Optional[str] = None


class ErrorOut(BaseModel):
    detail: str
    field: Optional[str] = None
