"""
ZTrust Security Types

Type definitions for the trust/session core:
- Principals and roles
- Risk signals and trust scores
- Session states, events and views
- Audit, journal and breach report records
- Error hierarchy
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# Identity Types
# =============================================================================


class Role(str, Enum):
    """Principal roles."""

    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(frozen=True)
class Principal:
    """An authenticated identity held for the lifetime of a session."""

    identifier: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {"identifier": self.identifier, "role": self.role.value}


# =============================================================================
# Trust Types
# =============================================================================


@dataclass(frozen=True)
class Signal:
    """A boolean-toggleable environmental risk indicator."""

    id: str
    name: str
    category: str
    impact: int
    active: bool = False
    icon: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "impact": self.impact,
            "active": self.active,
        }


class RiskClassification(str, Enum):
    """Classification of a trust score."""

    NORMAL = "NORMAL"
    HIGH_RISK = "HIGH_RISK"


@dataclass(frozen=True)
class TrustScore:
    """Aggregated trust score for a signal set."""

    value: int
    classification: RiskClassification
    active_signals: tuple[str, ...] = ()

    @property
    def is_high_risk(self) -> bool:
        return self.classification == RiskClassification.HIGH_RISK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "classification": self.classification.value,
            "active_signals": list(self.active_signals),
        }


# =============================================================================
# Session Types
# =============================================================================


class SessionState(str, Enum):
    """States of the session workflow."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    VERIFYING_CREDENTIALS = "VERIFYING_CREDENTIALS"
    AWAITING_SECOND_FACTOR = "AWAITING_SECOND_FACTOR"
    ACTIVE = "ACTIVE"
    RESTRICTED = "RESTRICTED"


class SessionEvent(str, Enum):
    """Events that drive session transitions."""

    SUBMIT_CREDENTIALS = "SUBMIT_CREDENTIALS"
    CREDENTIALS_VERIFIED = "CREDENTIALS_VERIFIED"
    SECOND_FACTOR_COMPLETED = "SECOND_FACTOR_COMPLETED"
    ISOLATION_FIRED = "ISOLATION_FIRED"
    LOGOUT = "LOGOUT"
    ACKNOWLEDGE = "ACKNOWLEDGE"


class SessionView(str, Enum):
    """Role-routed view of an active session."""

    USER_DASHBOARD = "USER_DASHBOARD"
    ADMIN_CONSOLE = "ADMIN_CONSOLE"


# =============================================================================
# Audit Types
# =============================================================================


class AuditStatus(str, Enum):
    """Outcome status of an audit entry."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    INFO = "INFO"
    WARNING = "WARNING"


@dataclass(frozen=True)
class AuditEntry:
    """A single record in the audit trail."""

    sequence: int
    principal: str
    action: str
    status: AuditStatus
    details: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize audit entry."""
        return {
            "id": self.id,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
            "principal": self.principal,
            "action": self.action,
            "status": self.status.value,
            "details": self.details,
        }


class JournalImpact(str, Enum):
    """Impact level of a trust journal narrative."""

    LOW = "LOW"
    HIGH = "HIGH"


@dataclass(frozen=True)
class JournalEntry:
    """Narrative advisory recorded after a score recomputation."""

    impact: JournalImpact
    message: str
    strength: int
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "impact": self.impact.value,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "strength": self.strength,
        }


# =============================================================================
# Breach Report Types
# =============================================================================


class BreachSeverity(str, Enum):
    """Severity of a reported breach."""

    CRITICAL = "CRITICAL"
    MODERATE = "MODERATE"


@dataclass(frozen=True)
class BreachReport:
    """A breach flagged by a user for administrative review."""

    source: str
    date: str
    severity: BreachSeverity
    description: str
    reporter: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "date": self.date,
            "severity": self.severity.value,
            "description": self.description,
            "reporter": self.reporter,
        }


# =============================================================================
# Errors
# =============================================================================


class ZTrustError(Exception):
    """Base class for ZTrust errors."""
    pass


class UnknownSignalError(ZTrustError, KeyError):
    """Raised when a signal id is not in the registry."""

    def __init__(self, signal_id: str):
        super().__init__(signal_id)
        self.signal_id = signal_id

    def __str__(self) -> str:
        return f"Unknown signal: {self.signal_id}"


class UnknownBreachReportError(ZTrustError, KeyError):
    """Raised when a breach report id is not pending."""

    def __init__(self, report_id: str):
        super().__init__(report_id)
        self.report_id = report_id

    def __str__(self) -> str:
        return f"Unknown breach report: {self.report_id}"


class AdvisoryUnavailable(ZTrustError):
    """Raised when the advisory collaborator fails or times out."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


__all__: List[str] = [
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
    "ZTrustError",
    "UnknownSignalError",
    "UnknownBreachReportError",
    "AdvisoryUnavailable",
]
