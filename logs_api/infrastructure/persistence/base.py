"""LogStorage - Interface base para el almacenamiento de logs.

Define el contrato común que implementan PostgreSQL y el store en memoria.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.domain import LogRecord, NewLogRecord


SORTABLE_FIELDS = ("event_time", "id", "service", "level", "ingested_at")
GROUPABLE_FIELDS = ("service", "level")

# Most recent first; id makes the order total.
DEFAULT_ORDER: Tuple[Tuple[str, str], ...] = (("event_time", "desc"), ("id", "desc"))


@dataclass(frozen=True)
class LogPredicate:
    """Conjunction of equality filters. ``None`` means unconstrained."""

    service: Optional[str] = None
    level: Optional[str] = None

    def items(self) -> List[Tuple[str, str]]:
        return [(name, value) for name, value in (("service", self.service), ("level", self.level)) if value is not None]

    def matches(self, record: LogRecord) -> bool:
        return all(getattr(record, name) == value for name, value in self.items())


def validate_order(order: Sequence[Tuple[str, str]]) -> Tuple[Tuple[str, str], ...]:
    checked = []
    for field_name, direction in order:
        direction = direction.lower()
        if field_name not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {field_name!r}")
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction {direction!r}")
        checked.append((field_name, direction))
    return tuple(checked)


def validate_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")


def validate_group_fields(fields: Sequence[str]) -> Tuple[str, ...]:
    for field_name in fields:
        if field_name not in GROUPABLE_FIELDS:
            raise ValueError(f"Cannot group by {field_name!r}")
    if len(set(fields)) != len(fields):
        raise ValueError(f"Duplicate group fields: {list(fields)}")
    return tuple(fields)


class LogStorage(ABC):
    """Append-only store for log records.

    Implementations must make ``insert`` atomic (no partial record is ever
    visible) and wrap backend failures in ``StorageError``.
    """

    @abstractmethod
    def insert(self, record: NewLogRecord) -> LogRecord:
        """Persist one record and return it with ``id`` and ``ingested_at``."""

    @abstractmethod
    def query(
        self,
        predicate: LogPredicate,
        order: Sequence[Tuple[str, str]] = DEFAULT_ORDER,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LogRecord]:
        """Return at most ``limit`` matching records, skipping ``offset``."""

    @abstractmethod
    def count(self, predicate: LogPredicate) -> int:
        """Number of records matching ``predicate``, ignoring pagination."""

    @abstractmethod
    def count_grouped_by(self, fields: Sequence[str]) -> Dict[Tuple[str, ...], int]:
        """Record counts keyed by the tuple of values of ``fields``."""

    @abstractmethod
    def ping(self) -> None:
        """Raise ``StorageError`` if the store is unreachable."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """postgresql | memory"""
