"""Store de logs en memoria.

- Usado en tests y como modo degradado cuando DATABASE_URL no está configurado.
- Thread-safe: un único lock protege la lista (los endpoints síncronos corren
  en el threadpool de FastAPI).
- Nada sobrevive al proceso.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.domain import LogRecord, NewLogRecord
from .base import (
    DEFAULT_ORDER,
    LogPredicate,
    LogStorage,
    validate_group_fields,
    validate_order,
    validate_page,
)

logger = logging.getLogger(__name__)


class InMemoryLogStorage(LogStorage):
    def __init__(self) -> None:
        self._records: List[LogRecord] = []
        self._lock = threading.Lock()
        self._last_ingested_at: Optional[datetime] = None

    @property
    def backend_name(self) -> str:
        return "memory"

    def insert(self, record: NewLogRecord) -> LogRecord:
        with self._lock:
            now = datetime.now(timezone.utc)
            if self._last_ingested_at is not None and now < self._last_ingested_at:
                now = self._last_ingested_at
            self._last_ingested_at = now

            stored = record.materialize(ingested_at=now)
            self._records.append(stored)
            logger.debug("[MemoryStorage] Stored log id=%s total=%s", stored.id, len(self._records))
        return stored

    def query(
        self,
        predicate: LogPredicate,
        order: Sequence[Tuple[str, str]] = DEFAULT_ORDER,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LogRecord]:
        order = validate_order(order)
        validate_page(limit, offset)
        with self._lock:
            matching = [r for r in self._records if predicate.matches(r)]

        # Stable sorts applied from the least to the most significant key.
        for field_name, direction in reversed(order):
            matching.sort(key=lambda r: getattr(r, field_name), reverse=(direction == "desc"))

        return matching[offset:offset + limit]

    def count(self, predicate: LogPredicate) -> int:
        with self._lock:
            return sum(1 for r in self._records if predicate.matches(r))

    def count_grouped_by(self, fields: Sequence[str]) -> Dict[Tuple[str, ...], int]:
        fields = validate_group_fields(fields)
        with self._lock:
            counts = Counter(tuple(getattr(r, f) for f in fields) for r in self._records)
        return dict(counts)

    def ping(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
