"""
Breach Report Queue.

Breaches flagged by users wait here until an administrator reviews them.
Reports are immutable; review removes them from the pending queue.
"""

from __future__ import annotations

from typing import Union

import structlog

from ztrust.security.types import BreachReport, BreachSeverity, UnknownBreachReportError

logger = structlog.get_logger(__name__)


class BreachQueue:
    """Pending breach reports in submission order."""

    def __init__(self) -> None:
        self._pending: dict[str, BreachReport] = {}
        self._reviewed = 0

    def report(
        self,
        source: str,
        date: str,
        severity: Union[BreachSeverity, str],
        description: str,
        reporter: str,
    ) -> BreachReport:
        """Queue a new breach report."""
        report = BreachReport(
            source=source,
            date=date,
            severity=BreachSeverity(severity),
            description=description,
            reporter=reporter,
        )
        self._pending[report.id] = report
        logger.info(
            "Breach reported",
            report_id=report.id,
            source=source,
            severity=report.severity.value,
        )
        return report

    def review(self, report_id: str) -> BreachReport:
        """Remove a report from the pending queue."""
        try:
            report = self._pending.pop(report_id)
        except KeyError:
            raise UnknownBreachReportError(report_id) from None
        self._reviewed += 1
        return report

    def pending(self) -> list[BreachReport]:
        return list(self._pending.values())

    @property
    def reviewed_count(self) -> int:
        return self._reviewed

    def __len__(self) -> int:
        return len(self._pending)
