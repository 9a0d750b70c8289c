"""Endpoints de logs: ingesta (POST) y consulta paginada (GET)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from ..ingest import IngestHandler
from ..queries import LogQueryEngine
from ..schemas import ErrorOut, LogEntryOut, LogPageOut
from .dependencies import get_ingest_handler, get_query_engine

router = APIRouter(tags=["logs"])

_INGEST_EXAMPLE = {
    "service": "auth-service",
    "level": "ERROR",
    "message": "Failed login",
    "metadata": {"user_id": "456", "ip": "192.168.1.2"},
}


@router.post(
    "/logs",
    response_model=LogEntryOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}, 503: {"model": ErrorOut}},
)
def create_log(
    payload: Any = Body(..., examples=[_INGEST_EXAMPLE]),
    handler: IngestHandler = Depends(get_ingest_handler),
):
    """Ingesta de un registro.

    La validación la hace el handler (no pydantic) para que todos los errores
    de entrada salgan como 400 con el campo que falló.
    """
    record = handler.ingest(payload)
    return LogEntryOut.from_record(record)


@router.get("/logs", response_model=LogPageOut, responses={500: {"model": ErrorOut}, 503: {"model": ErrorOut}})
def get_logs(request: Request, engine: LogQueryEngine = Depends(get_query_engine)):
    """Consulta paginada: ?service=&level=&limit=&offset=

    Se leen los query params crudos: un ``limit`` no numérico vuelve al
    default en lugar de producir un 422, y los parámetros desconocidos se
    ignoran.
    """
    page = engine.query(dict(request.query_params))
    return LogPageOut.from_page(page)
