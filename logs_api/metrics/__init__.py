"""Metrics module - aggregate counts over stored logs."""

from .aggregator import MetricsAggregator
from .models import LogMetrics

__all__ = ["LogMetrics", "MetricsAggregator"]
