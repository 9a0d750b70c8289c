"""LogRecord - el único modelo persistido del motor.

Un registro se crea una sola vez (ingesta), se lee muchas veces (consulta y
métricas) y nunca se modifica ni se borra.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


# Conventional severity vocabulary. Advisory only: producer-defined levels
# are accepted and stored as sent (upper-cased).
KNOWN_LEVELS = ("ERROR", "WARN", "INFO", "DEBUG")


@dataclass(frozen=True)
class NewLogRecord:
    """Validated candidate, ready to be written.

    Produced by the ingest handler after trimming, level normalization and
    defaulting. ``id`` and ``ingested_at`` are still missing: the storage
    layer assigns them.
    """

    service: str
    level: str
    message: str
    event_time: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def materialize(self, ingested_at: datetime, record_id: Optional[str] = None) -> "LogRecord":
        return LogRecord(
            id=record_id or str(uuid.uuid4()),
            event_time=self.event_time,
            service=self.service,
            level=self.level,
            message=self.message,
            metadata=self.metadata,
            ingested_at=ingested_at,
        )


@dataclass(frozen=True)
class LogRecord:
    """Registro de log persistido (inmutable)."""

    id: str
    event_time: datetime
    service: str
    level: str
    message: str
    metadata: Dict[str, Any]
    ingested_at: datetime

    @property
    def is_known_level(self) -> bool:
        return self.level in KNOWN_LEVELS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_time": self.event_time,
            "service": self.service,
            "level": self.level,
            "message": self.message,
            "metadata": self.metadata,
            "ingested_at": self.ingested_at,
        }
