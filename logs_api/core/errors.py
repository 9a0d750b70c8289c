"""Error taxonomy for the log engine.

Every failure is scoped to a single call; none of these is fatal to the
process.
"""

from __future__ import annotations

from typing import Optional


class LogEngineError(Exception):
    """Base class for all engine errors."""


class ValidationError(LogEngineError):
    """Caller-fixable input problem (4xx). Names the failing field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StorageError(LogEngineError):
    """The store could not complete the operation (5xx).

    ``retryable`` is True for connectivity loss and pool exhaustion. Retrying
    an ingest is safe: a duplicate log line is acceptable.
    """

    def __init__(self, message: str, *, retryable: bool = True, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.retryable = retryable
        self.cause = cause


class QueryError(LogEngineError):
    """Malformed filter value. Resolved by defaulting, never surfaced."""

    def __init__(self, param: str, value: object):
        super().__init__(f"Invalid value for {param}: {value!r}")
        self.param = param
        self.value = value
