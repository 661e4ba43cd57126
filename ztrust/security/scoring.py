"""
Trust Score Aggregator.

Pure aggregation of a signal set into a bounded integer score:

    score = clamp(base + sum(impact of active signals), 0, ceiling)

The score is classified HIGH_RISK once it reaches the high-risk threshold.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ztrust.core.config import TrustConfig
from ztrust.security.types import RiskClassification, Signal, TrustScore


class TrustScoreAggregator:
    """Stateless trust score calculator."""

    def __init__(
        self,
        base: int = 25,
        high_risk_threshold: int = 90,
        ceiling: int = 100,
    ) -> None:
        if not 0 <= base <= ceiling:
            raise ValueError("base must lie within [0, ceiling]")
        self.base = base
        self.high_risk_threshold = high_risk_threshold
        self.ceiling = ceiling

    @classmethod
    def from_config(cls, config: Optional[TrustConfig] = None) -> "TrustScoreAggregator":
        config = config or TrustConfig()
        return cls(
            base=config.base_score,
            high_risk_threshold=config.high_risk_threshold,
            ceiling=config.max_score,
        )

    @property
    def baseline(self) -> TrustScore:
        """Score of a session with no active signals."""
        return TrustScore(value=self.base, classification=self.classify(self.base))

    def classify(self, value: int) -> RiskClassification:
        if value >= self.high_risk_threshold:
            return RiskClassification.HIGH_RISK
        return RiskClassification.NORMAL

    def evaluate(self, signals: Iterable[Signal]) -> TrustScore:
        """Aggregate the active members of a signal set."""
        active = [s for s in signals if s.active]
        raw = self.base + sum(s.impact for s in active)
        value = max(0, min(self.ceiling, raw))
        return TrustScore(
            value=value,
            classification=self.classify(value),
            active_signals=tuple(s.id for s in active),
        )
