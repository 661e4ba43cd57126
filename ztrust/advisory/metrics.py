"""
Collaborator call metrics.

A bounded in-memory sink for ``ApiMetric`` records with a rolling summary.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional

from ztrust.advisory.base import ApiMetric, MetricStatus


@dataclass(frozen=True)
class MetricsSummary:
    """Aggregate over the retained metrics window."""
    total: int
    avg_duration_ms: int
    error_rate_pct: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "avg_duration_ms": self.avg_duration_ms,
            "error_rate_pct": self.error_rate_pct,
        }


class MetricsRecorder:
    """Keeps the most recent metrics, newest-first. Usable as a MetricsSink."""

    def __init__(self, max_metrics: int = 100):
        self._metrics: Deque[ApiMetric] = deque(maxlen=max_metrics)

    def __call__(self, metric: ApiMetric) -> None:
        self._metrics.appendleft(metric)

    def metrics(self, limit: Optional[int] = None) -> list[ApiMetric]:
        items = list(self._metrics)
        return items[:limit] if limit is not None else items

    def summary(self) -> MetricsSummary:
        if not self._metrics:
            return MetricsSummary(total=0, avg_duration_ms=0, error_rate_pct=0)
        total = len(self._metrics)
        errors = sum(1 for m in self._metrics if m.status == MetricStatus.ERROR)
        duration = sum(m.duration_ms for m in self._metrics)
        return MetricsSummary(
            total=total,
            avg_duration_ms=round(duration / total),
            error_rate_pct=round(errors / total * 100),
        )

    def __len__(self) -> int:
        return len(self._metrics)
