"""Persistence infrastructure for log records."""

from .base import DEFAULT_ORDER, LogPredicate, LogStorage
from .memory import InMemoryLogStorage
from .postgres import PostgresLogStorage
from .postgres_setup import ensure_schema

__all__ = [
    "DEFAULT_ORDER",
    "LogPredicate",
    "LogStorage",
    "InMemoryLogStorage",
    "PostgresLogStorage",
    "ensure_schema",
]
