"""PostgreSQL Storage - almacenamiento durable de logs.

Tabla única ``logs`` (append-only). Todas las consultas son SQL parametrizado;
los nombres de columna que se interpolan (ORDER BY / GROUP BY) salen siempre
de listas blancas validadas en ``base``.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, ProgrammingError, SQLAlchemyError

from ...core.domain import LogRecord, NewLogRecord
from ...core.errors import StorageError
from .base import (
    DEFAULT_ORDER,
    LogPredicate,
    LogStorage,
    validate_group_fields,
    validate_order,
    validate_page,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, event_time, service, level, message, metadata, ingested_at"

_INSERT_SQL = text(
    f"""
    INSERT INTO logs (id, event_time, service, level, message, metadata)
    VALUES (CAST(:id AS UUID), :event_time, :service, :level, :message, :metadata)
    RETURNING {_COLUMNS}
    """
).bindparams(bindparam("metadata", type_=JSONB))


def _where_clause(predicate: LogPredicate) -> Tuple[str, Dict[str, Any]]:
    items = predicate.items()
    if not items:
        return "", {}
    conditions = [f"{name} = :{name}" for name, _ in items]
    return " WHERE " + " AND ".join(conditions), dict(items)


def _row_to_record(row: Mapping[str, Any]) -> LogRecord:
    metadata = row["metadata"]
    if isinstance(metadata, (str, bytes)):
        metadata = json.loads(metadata)
    return LogRecord(
        id=str(row["id"]),
        event_time=row["event_time"],
        service=row["service"],
        level=row["level"],
        message=row["message"],
        metadata=metadata if metadata is not None else {},
        ingested_at=row["ingested_at"],
    )


def _storage_error(operation: str, e: SQLAlchemyError) -> StorageError:
    # Bad data and bad SQL fail the same way on every attempt.
    retryable = not isinstance(e, (DataError, ProgrammingError))
    return StorageError(f"{operation} failed: {type(e).__name__}", retryable=retryable, cause=e)


class PostgresLogStorage(LogStorage):
    """Storage para LogRecords en PostgreSQL.

    Comparte el pool del engine entre todas las llamadas concurrentes; un pool
    agotado se convierte en ``StorageError`` al vencer ``pool_timeout``.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def backend_name(self) -> str:
        return "postgresql"

    @property
    def engine(self) -> Engine:
        return self._engine

    def insert(self, record: NewLogRecord) -> LogRecord:
        params = {
            "id": str(uuid.uuid4()),
            "event_time": record.event_time,
            "service": record.service,
            "level": record.level,
            "message": record.message,
            "metadata": record.metadata,
        }
        try:
            # Single statement in its own transaction: committed on exit or not at all.
            with self._engine.begin() as conn:
                row = conn.execute(_INSERT_SQL, params).mappings().one()
        except SQLAlchemyError as e:
            logger.exception("[Storage] Failed to insert log service=%s", record.service)
            raise _storage_error("insert", e) from e

        return _row_to_record(row)

    def query(
        self,
        predicate: LogPredicate,
        order: Sequence[Tuple[str, str]] = DEFAULT_ORDER,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LogRecord]:
        order = validate_order(order)
        validate_page(limit, offset)

        where, params = _where_clause(predicate)
        order_by = ", ".join(f"{name} {direction.upper()}" for name, direction in order)
        sql = f"SELECT {_COLUMNS} FROM logs{where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        sql += " LIMIT :limit OFFSET :offset"
        params.update({"limit": limit, "offset": offset})

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), params).mappings().all()
        except SQLAlchemyError as e:
            logger.exception("[Storage] Failed to fetch logs")
            raise _storage_error("query", e) from e

        return [_row_to_record(row) for row in rows]

    def count(self, predicate: LogPredicate) -> int:
        where, params = _where_clause(predicate)
        try:
            with self._engine.connect() as conn:
                total = conn.execute(text(f"SELECT COUNT(*) FROM logs{where}"), params).scalar_one()
        except SQLAlchemyError as e:
            logger.exception("[Storage] Failed to count logs")
            raise _storage_error("count", e) from e
        return int(total)

    def count_grouped_by(self, fields: Sequence[str]) -> Dict[Tuple[str, ...], int]:
        fields = validate_group_fields(fields)
        if not fields:
            return {(): self.count(LogPredicate())}

        columns = ", ".join(fields)
        sql = f"SELECT {columns}, COUNT(*) AS count FROM logs GROUP BY {columns}"
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql)).mappings().all()
        except SQLAlchemyError as e:
            logger.exception("[Storage] Failed to group logs by %s", columns)
            raise _storage_error("count_grouped_by", e) from e

        return {tuple(row[f] for f in fields): int(row["count"]) for row in rows}

    def ping(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("[Storage] PostgreSQL ping failed err=%s", type(e).__name__)
            raise _storage_error("ping", e) from e

    def close(self) -> None:
        self._engine.dispose()
