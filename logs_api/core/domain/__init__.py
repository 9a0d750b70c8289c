"""Domain layer - Modelos de registro de log."""

from .log_record import LogRecord, NewLogRecord, KNOWN_LEVELS

__all__ = ["LogRecord", "NewLogRecord", "KNOWN_LEVELS"]
