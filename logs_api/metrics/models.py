"""Data models for aggregate log metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class LogMetrics:
    """Counts over the whole record set at call time."""

    total_logs: int
    services: Dict[str, int] = field(default_factory=dict)
    levels: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_logs": self.total_logs,
            "services": dict(self.services),
            "levels": dict(self.levels),
        }
