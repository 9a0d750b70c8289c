"""Health and readiness endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from ..core.errors import StorageError
from ..infrastructure.persistence import LogStorage
from ..schemas import HealthOut
from .dependencies import get_storage

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthOut)
def health(storage: LogStorage = Depends(get_storage)):
    """Liveness probe.

    Always 200 while the process runs; ``storage`` says whether the store
    answered. No error details are exposed to the client.
    """
    try:
        storage.ping()
        status, storage_status = "healthy", "ok"
    except StorageError:
        status, storage_status = "degraded", "unreachable"

    return HealthOut(
        status=status,
        timestamp=datetime.now(timezone.utc),
        storage=storage_status,
        backend=storage.backend_name,
    )


@router.get("/ready")
def ready(storage: LogStorage = Depends(get_storage)):
    """Readiness probe: 503 until the store answers."""
    try:
        storage.ping()
    except StorageError:
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}
