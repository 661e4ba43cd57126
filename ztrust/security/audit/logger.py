"""
ZTrust Audit Log

Append-only, bounded audit trail of session transitions, signal toggles and
administrative actions.
"""

from __future__ import annotations

import itertools
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

import structlog

from ztrust.security.types import AuditEntry, AuditStatus

logger = structlog.get_logger(__name__)

SYSTEM_PRINCIPAL = "System"


class AuditLog:
    """
    Bounded ring of audit entries.

    Entries are kept in write order; ``recent`` presents them newest-first.
    Once ``max_entries`` is reached the oldest entry is evicted. Each entry
    carries a monotonically increasing ``sequence`` so chronological order
    survives eviction and display reordering.
    """

    def __init__(self, max_entries: int = 500):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries

        self._entries: Deque[AuditEntry] = deque(maxlen=max_entries)
        self._sequence = itertools.count(1)
        self._evicted = 0

        # Event handlers (for real-time listeners)
        self._handlers: List[Callable[[AuditEntry], None]] = []

    # =========================================================================
    # Logging Methods
    # =========================================================================

    def record(
        self,
        action: str,
        status: AuditStatus,
        principal: Optional[str] = None,
        details: Optional[str] = None,
    ) -> AuditEntry:
        """Append one audit entry and notify listeners."""
        entry = AuditEntry(
            sequence=next(self._sequence),
            principal=principal or SYSTEM_PRINCIPAL,
            action=action,
            status=status,
            details=details,
        )

        if len(self._entries) == self.max_entries:
            self._evicted += 1
        self._entries.append(entry)

        self._export(entry)

        for handler in self._handlers:
            try:
                handler(entry)
            except Exception as e:
                logger.error("Audit handler error", error=str(e), audit_id=entry.id)

        return entry

    def _export(self, entry: AuditEntry) -> None:
        severity_map = {
            AuditStatus.SUCCESS: logger.info,
            AuditStatus.INFO: logger.info,
            AuditStatus.WARNING: logger.warning,
            AuditStatus.FAILED: logger.warning,
        }
        log_fn = severity_map.get(entry.status, logger.info)
        log_fn(
            f"AUDIT: {entry.action}",
            audit_id=entry.id,
            sequence=entry.sequence,
            principal=entry.principal,
            status=entry.status.value,
            details=entry.details,
        )

    def add_handler(self, handler: Callable[[AuditEntry], None]) -> None:
        """Add a real-time audit listener."""
        self._handlers.append(handler)

    def remove_handler(self, handler: Callable[[AuditEntry], None]) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def entries(self) -> List[AuditEntry]:
        """All retained entries in chronological write order."""
        return list(self._entries)

    def recent(self, limit: Optional[int] = None) -> List[AuditEntry]:
        """Retained entries newest-first, optionally truncated."""
        newest_first = list(reversed(self._entries))
        if limit is not None:
            return newest_first[:limit]
        return newest_first

    def query(
        self,
        principal: Optional[str] = None,
        status: Optional[AuditStatus] = None,
        action: Optional[str] = None,
        limit: int = 100,
    ) -> List[AuditEntry]:
        """Query retained entries newest-first."""
        results = []
        for entry in reversed(self._entries):
            if principal is not None and entry.principal != principal:
                continue
            if status is not None and entry.status != status:
                continue
            if action is not None and entry.action != action:
                continue
            results.append(entry)
            if len(results) >= limit:
                break
        return results

    @property
    def evicted(self) -> int:
        """Number of entries dropped by the retention bound."""
        return self._evicted

    def get_stats(self) -> Dict[str, int]:
        stats: Dict[str, int] = {s.value: 0 for s in AuditStatus}
        for entry in self._entries:
            stats[entry.status.value] += 1
        stats["retained"] = len(self._entries)
        stats["evicted"] = self._evicted
        return stats

    def __len__(self) -> int:
        return len(self._entries)
