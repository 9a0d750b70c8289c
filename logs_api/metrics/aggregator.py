"""Agregador de métricas de logs.

Se calcula en cada llamada directamente desde el storage: sin caché ni
contadores incrementales. Es la operación más cara del motor (recorre los
índices de agrupación completos).
"""

from __future__ import annotations

import logging
from collections import Counter

from ..infrastructure.persistence import LogStorage
from .models import LogMetrics

logger = logging.getLogger(__name__)


class MetricsAggregator:
    def __init__(self, storage: LogStorage):
        self._storage = storage

    def compute(self) -> LogMetrics:
        """Total, per-service and per-level counts.

        One grouped read by (service, level) feeds all three numbers, so
        ``total_logs == sum(services) == sum(levels)`` even while writers
        are active.
        """
        grouped = self._storage.count_grouped_by(("service", "level"))

        services: Counter = Counter()
        levels: Counter = Counter()
        for (service, level), count in grouped.items():
            services[service] += count
            levels[level] += count

        metrics = LogMetrics(
            total_logs=sum(grouped.values()),
            services=dict(services),
            levels=dict(levels),
        )
        logger.debug(
            "METRICS total=%s services=%s levels=%s",
            metrics.total_logs,
            len(metrics.services),
            len(metrics.levels),
        )
        return metrics
