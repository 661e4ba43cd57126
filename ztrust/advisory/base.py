"""
Advisory collaborator contracts.

The advisory service produces narrative text about the current session. It
is never authoritative for any state transition; callers treat its output as
decoration and substitute a fallback sentence whenever it fails.
"""

from __future__ import annotations

import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence

from ztrust.security.types import AuditEntry, BreachReport


class MetricStatus(str, Enum):
    """Outcome of an external collaborator call."""
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ApiMetric:
    """One external collaborator call, as seen by the metrics sink."""
    endpoint: str
    duration_ms: float
    status: MetricStatus
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:9])
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "endpoint": self.endpoint,
            "duration_ms": self.duration_ms,
            "status": self.status.value,
        }


MetricsSink = Callable[[ApiMetric], None]


class AdvisoryService(ABC):
    """Abstract narrative-text generator."""

    @abstractmethod
    async def advise(self, active_signal_names: Sequence[str], score: int) -> str:
        """Describe the current risk posture of a session."""
        pass

    @abstractmethod
    async def summarize(
        self,
        recent_logs: Sequence[AuditEntry],
        recent_breaches: Sequence[BreachReport],
    ) -> str:
        """Summarize recent audit activity for an administrator."""
        pass
