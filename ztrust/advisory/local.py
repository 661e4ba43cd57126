"""
Local Advisory Service

Offline advisory implementation used by the console and by tests. Messages
are picked from fixed templates; an optional simulated latency mimics a
remote round trip.
"""

from __future__ import annotations

import asyncio
import random
from typing import Optional, Sequence

from ztrust.advisory.base import AdvisoryService
from ztrust.security.types import AuditEntry, AuditStatus, BreachReport, BreachSeverity

QUIET_ADVICE = (
    "Your session is secured by standard monitoring and continuous identity verification."
)


class LocalAdvisoryService(AdvisoryService):
    """Template-driven advisory generator."""

    def __init__(
        self,
        latency: tuple[float, float] = (0.0, 0.0),
        rng: Optional[random.Random] = None,
    ):
        low, high = latency
        if low < 0 or high < low:
            raise ValueError("latency must be a (min, max) pair with 0 <= min <= max")
        self.latency = latency
        self._rng = rng or random.Random()

    async def _simulate_latency(self) -> None:
        low, high = self.latency
        if high > 0:
            await asyncio.sleep(self._rng.uniform(low, high))

    async def advise(self, active_signal_names: Sequence[str], score: int) -> str:
        await self._simulate_latency()

        names = list(active_signal_names)
        if not names:
            return QUIET_ADVICE

        templates = [
            f"Caution: Detected {' and '.join(names)}. Trust level is degrading due to environmental risks.",
            f"Security Alert: {names[0]} signal identified. Implementing enhanced packet inspection.",
            f"Protocol update: Mitigating risks associated with {', '.join(names)}.",
            f"Anomalous behavior detected via {names[-1]}. Monitoring for lateral movement.",
            f"Zero-Trust policy applied to {' context'.join(names)}. Re-authentication may be required.",
        ]
        return self._rng.choice(templates)

    async def summarize(
        self,
        recent_logs: Sequence[AuditEntry],
        recent_breaches: Sequence[BreachReport],
    ) -> str:
        await self._simulate_latency()

        warnings = sum(1 for e in recent_logs if e.status == AuditStatus.WARNING)
        failures = sum(1 for e in recent_logs if e.status == AuditStatus.FAILED)
        critical = sum(1 for b in recent_breaches if b.severity == BreachSeverity.CRITICAL)

        if not recent_logs and not recent_breaches:
            return "No session activity recorded. Telemetry is nominal."

        parts = [
            f"Reviewed {len(recent_logs)} recent events: "
            f"{warnings} warnings and {failures} failed actions."
        ]
        if recent_breaches:
            parts.append(
                f"{len(recent_breaches)} security flags raised by endpoints, "
                f"{critical} of them critical."
            )
        if failures or critical:
            parts.append("Recommend verifying isolated endpoints before revoking restrictions.")
        else:
            parts.append("No immediate action required.")
        return " ".join(parts)
