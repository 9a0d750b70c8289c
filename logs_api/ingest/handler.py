"""Handler de ingesta: valida, completa defaults y escribe UNA vez."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from ..core.domain import LogRecord
from ..infrastructure.persistence import LogStorage
from .validation import validate_log_entry

logger = logging.getLogger(__name__)


class IngestHandler:
    """Write path of the engine.

    Exactly one ``storage.insert`` per call and no retries: a
    ``StorageError`` goes straight back to the caller, who may retry (a
    duplicate log line is acceptable).
    """

    def __init__(
        self,
        storage: LogStorage,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._storage = storage
        self._clock = clock

    def ingest(self, data: Mapping[str, Any]) -> LogRecord:
        """Validate ``data`` and persist it.

        Returns:
            The stored record, with ``id`` and ``ingested_at`` populated.

        Raises:
            ValidationError: bad input; nothing was written.
            StorageError: the write failed; nothing was written.
        """
        candidate = validate_log_entry(data, now=self._clock)
        record = self._storage.insert(candidate)

        if not record.is_known_level:
            logger.debug("Non-standard level %r from service %s", record.level, record.service)
        logger.info("Created log entry: %s - %s - %s", record.service, record.level, record.message)
        return record
