"""Consultas de logs (read path)."""

from .log_query import DEFAULT_LIMIT, MAX_LIMIT, LogPage, LogQuery, LogQueryEngine

__all__ = ["DEFAULT_LIMIT", "MAX_LIMIT", "LogPage", "LogQuery", "LogQueryEngine"]
