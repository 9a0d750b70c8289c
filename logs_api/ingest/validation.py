"""Validación de registros entrantes.

Reglas:
- service, level, message: obligatorios, string, no vacíos tras strip()
- level: se normaliza a mayúsculas, pero NO se valida contra un vocabulario
- metadata: documento clave-valor (objeto JSON) de cualquier profundidad
- event_time (alias: timestamp): datetime o string ISO-8601; sin zona → UTC
- ningún texto (campos ni claves/valores de metadata) puede contener NUL:
  PostgreSQL no los admite ni en TEXT ni en JSONB
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.domain import NewLogRecord
from ..core.errors import ValidationError

# Column widths in migrations/001_logs.sql
MAX_SERVICE_LENGTH = 255
MAX_LEVEL_LENGTH = 50

_MISSING = object()
_NUL = "\x00"

_DATETIME_ADAPTER = TypeAdapter(datetime)


def _required_text(data: Mapping[str, Any], field: str, max_length: Optional[int] = None) -> str:
    value = data.get(field, _MISSING)
    if value is _MISSING or value is None:
        raise ValidationError(field, "is required")
    if not isinstance(value, str):
        raise ValidationError(field, f"must be a string, got {type(value).__name__}")
    if _NUL in value:
        raise ValidationError(field, "must not contain NUL characters")
    value = value.strip()
    if not value:
        raise ValidationError(field, "must not be empty")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return value


def _contains_nul(value: Any) -> bool:
    if isinstance(value, str):
        return _NUL in value
    if isinstance(value, dict):
        return any(_NUL in k or _contains_nul(v) for k, v in value.items())
    if isinstance(value, list):
        return any(_contains_nul(v) for v in value)
    return False


def parse_metadata(value: Any) -> Dict[str, Any]:
    """Return a detached copy of the metadata document.

    Accepts a mapping or a JSON string encoding an object. The copy goes
    through ``json``, so only JSON types survive and later changes to the
    caller's object are not seen. Key order is kept by the in-memory store
    only: PostgreSQL JSONB stores keys in its own order.
    """
    if value is None:
        return {}

    if isinstance(value, (str, bytes, bytearray)):
        try:
            value = json.loads(value)
        except ValueError as e:
            raise ValidationError("metadata", f"malformed JSON: {e}") from e

    if not isinstance(value, Mapping):
        raise ValidationError("metadata", f"must be a JSON object, got {type(value).__name__}")

    try:
        encoded = json.dumps(dict(value), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValidationError("metadata", f"not JSON-serializable: {e}") from e

    document = json.loads(encoded)
    if _contains_nul(document):
        raise ValidationError("metadata", "must not contain NUL characters")
    return document


def parse_event_time(value: Any) -> Optional[datetime]:
    if value is None:
        return None

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            value = _DATETIME_ADAPTER.validate_python(raw)
        except PydanticValidationError as e:
            raise ValidationError("event_time", f"invalid ISO-8601 timestamp: {raw!r}") from e

    if not isinstance(value, datetime):
        raise ValidationError("event_time", f"must be a datetime or ISO-8601 string, got {type(value).__name__}")

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_log_entry(
    data: Mapping[str, Any],
    *,
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> NewLogRecord:
    """Validate a candidate record and fill defaults.

    Raises:
        ValidationError: naming the first failing field.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("body", "must be a JSON object")

    service = _required_text(data, "service", MAX_SERVICE_LENGTH)
    level = _required_text(data, "level", MAX_LEVEL_LENGTH).upper()
    message = _required_text(data, "message")
    metadata = parse_metadata(data.get("metadata"))

    raw_time = data.get("event_time")
    if raw_time is None:
        raw_time = data.get("timestamp")
    event_time = parse_event_time(raw_time)
    if event_time is None:
        event_time = now()

    return NewLogRecord(
        service=service,
        level=level,
        message=message,
        event_time=event_time,
        metadata=metadata,
    )
