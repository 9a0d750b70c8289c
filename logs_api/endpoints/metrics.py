"""Aggregate metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..metrics import MetricsAggregator
from ..schemas import ErrorOut, MetricsOut
from .dependencies import get_metrics_aggregator

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=MetricsOut, responses={500: {"model": ErrorOut}, 503: {"model": ErrorOut}})
def get_metrics(aggregator: MetricsAggregator = Depends(get_metrics_aggregator)):
    """Totals by service and by level, computed on every call."""
    return MetricsOut.from_metrics(aggregator.compute())
