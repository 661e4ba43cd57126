"""
ZTrust Security Core

Trust evaluation building blocks for a single continuous-authentication
session:

- Risk signal registry
- Bounded trust score aggregation
- Re-armable isolation countdown
- Restriction registry gating future logins
- Bounded audit trail and trust journal
- Breach report queue for administrative review
"""

from ztrust.security.types import (
    AdvisoryUnavailable,
    AuditEntry,
    AuditStatus,
    BreachReport,
    BreachSeverity,
    JournalEntry,
    JournalImpact,
    Principal,
    RiskClassification,
    Role,
    SessionEvent,
    SessionState,
    SessionView,
    Signal,
    TrustScore,
    UnknownBreachReportError,
    UnknownSignalError,
    ZTrustError,
)
from ztrust.security.audit import AuditLog, TrustJournal
from ztrust.security.breaches import BreachQueue
from ztrust.security.restrictions import RestrictionRegistry
from ztrust.security.scoring import TrustScoreAggregator
from ztrust.security.signals import SignalRegistry
from ztrust.security.timer import IsolationTimer, TimerState

__all__ = [
    # Types
    "Role",
    "Principal",
    "Signal",
    "RiskClassification",
    "TrustScore",
    "SessionState",
    "SessionEvent",
    "SessionView",
    "AuditStatus",
    "AuditEntry",
    "JournalImpact",
    "JournalEntry",
    "BreachSeverity",
    "BreachReport",
    # Errors
    "ZTrustError",
    "UnknownSignalError",
    "UnknownBreachReportError",
    "AdvisoryUnavailable",
    # Components
    "SignalRegistry",
    "TrustScoreAggregator",
    "IsolationTimer",
    "TimerState",
    "RestrictionRegistry",
    "AuditLog",
    "TrustJournal",
    "BreachQueue",
]
