"""Core module - modelo de dominio y taxonomía de errores.

Estructura:
- domain/   → LogRecord y el candidato de ingesta
- errors.py → ValidationError / StorageError / QueryError
"""

from .errors import LogEngineError, QueryError, StorageError, ValidationError

__all__ = ["LogEngineError", "QueryError", "StorageError", "ValidationError"]
