"""
ZTrust Audit Module

Bounded audit trail and trust narrative journal.
"""

from ztrust.security.audit.journal import TrustJournal
from ztrust.security.audit.logger import SYSTEM_PRINCIPAL, AuditLog

__all__ = [
    "AuditLog",
    "TrustJournal",
    "SYSTEM_PRINCIPAL",
]
