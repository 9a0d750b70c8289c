"""Módulo de endpoints HTTP.

Contiene todos los endpoints de la API organizados por función.
"""

from .health import router as health_router
from .logs import router as logs_router
from .metrics import router as metrics_router

__all__ = [
    "health_router",
    "logs_router",
    "metrics_router",
]
