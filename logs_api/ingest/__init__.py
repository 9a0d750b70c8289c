"""Ingesta de logs (write path)."""

from .handler import IngestHandler
from .validation import validate_log_entry

__all__ = ["IngestHandler", "validate_log_entry"]
