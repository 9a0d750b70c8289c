"""Query engine: filtros, orden y paginación sobre el storage.

El read path es permisivo: valores mal formados se resuelven con defaults en
lugar de fallar, y las claves desconocidas se ignoran.

La paginación por offset NO es estable frente a inserciones concurrentes:
entre dos páginas pueden aparecer filas nuevas y desplazar el resto (saltos
o duplicados). Aceptable para una UI de monitoreo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from ..core.domain import LogRecord
from ..core.errors import QueryError
from ..infrastructure.persistence import DEFAULT_ORDER, LogPredicate, LogStorage

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


@dataclass(frozen=True)
class LogQuery:
    """Normalized query: filters plus effective page bounds."""

    predicate: LogPredicate
    limit: int
    offset: int


@dataclass(frozen=True)
class LogPage:
    logs: List[LogRecord]
    total: int
    limit: int
    offset: int


def _coerce_int(param: str, value: Any) -> int:
    if isinstance(value, bool):
        raise QueryError(param, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise QueryError(param, value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise QueryError(param, value) from None
    raise QueryError(param, value)


def _filter_value(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class LogQueryEngine:
    def __init__(
        self,
        storage: LogStorage,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ):
        if max_limit < 1:
            raise ValueError("max_limit must be >= 1")
        self._storage = storage
        self._max_limit = max_limit
        self._default_limit = min(max(default_limit, 1), max_limit)

    @property
    def max_limit(self) -> int:
        return self._max_limit

    @property
    def default_limit(self) -> int:
        return self._default_limit

    def _resolve_limit(self, raw: Any) -> int:
        if raw is None:
            return self._default_limit
        try:
            limit = _coerce_int("limit", raw)
        except QueryError as e:
            logger.debug("%s, using default %s", e, self._default_limit)
            return self._default_limit
        if limit < 0:
            return self._default_limit
        return min(limit, self._max_limit)

    def _resolve_offset(self, raw: Any) -> int:
        if raw is None:
            return 0
        try:
            offset = _coerce_int("offset", raw)
        except QueryError as e:
            logger.debug("%s, using 0", e)
            return 0
        return max(offset, 0)

    def normalize(self, filters: Optional[Mapping[str, Any]] = None) -> LogQuery:
        """Turn raw request parameters into a bounded query.

        Unknown keys are ignored. ``level`` is upper-cased like it is on
        ingest.
        """
        filters = filters or {}
        level = _filter_value(filters.get("level"))
        predicate = LogPredicate(
            service=_filter_value(filters.get("service")),
            level=level.upper() if level else None,
        )
        return LogQuery(
            predicate=predicate,
            limit=self._resolve_limit(filters.get("limit")),
            offset=self._resolve_offset(filters.get("offset")),
        )

    def query(self, filters: Optional[Mapping[str, Any]] = None) -> LogPage:
        """Return one page ordered by event_time DESC, id DESC, plus the total.

        ``total`` counts every match regardless of ``limit``/``offset``. Page
        and total are two reads, so under concurrent writes they may disagree
        by the rows committed in between.
        """
        q = self.normalize(filters)

        total = self._storage.count(q.predicate)
        if q.limit == 0 or q.offset >= total:
            logs: List[LogRecord] = []
        else:
            logs = self._storage.query(q.predicate, DEFAULT_ORDER, q.limit, q.offset)

        return LogPage(logs=logs, total=total, limit=q.limit, offset=q.offset)
