"""
ZTrust Audit and Registry Tests

Tests for the audit log, trust journal, restriction registry and breach
report queue.
"""

import pytest

from ztrust.security import (
    AuditLog,
    AuditStatus,
    BreachQueue,
    BreachSeverity,
    JournalImpact,
    RestrictionRegistry,
    TrustJournal,
    UnknownBreachReportError,
)


@pytest.fixture
def audit_log():
    return AuditLog(max_entries=5)


# ============================================================================
# Audit Log Tests
# ============================================================================


class TestAuditLog:
    """Tests for the bounded audit log."""

    def test_record(self, audit_log):
        """Test recording an entry."""
        entry = audit_log.record("Signal Adjusted", AuditStatus.INFO, "demo@ztrust.io", "Public WiFi -> ON")

        assert entry.sequence == 1
        assert entry.principal == "demo@ztrust.io"
        assert entry.details == "Public WiFi -> ON"
        assert len(audit_log) == 1

    def test_system_principal(self, audit_log):
        """Test entries without a principal are attributed to System."""
        entry = audit_log.record("Event Ignored", AuditStatus.WARNING)
        assert entry.principal == "System"

    def test_chronological_and_display_order(self, audit_log):
        """Test write order is preserved while display is newest-first."""
        for i in range(4):
            audit_log.record(f"action-{i}", AuditStatus.INFO)

        chronological = audit_log.entries()
        assert [e.action for e in chronological] == ["action-0", "action-1", "action-2", "action-3"]
        assert [e.sequence for e in chronological] == [1, 2, 3, 4]

        assert audit_log.recent() == list(reversed(chronological))
        assert [e.action for e in audit_log.recent(2)] == ["action-3", "action-2"]

    def test_retention_bound(self, audit_log):
        """Test the ring evicts the oldest entries."""
        for i in range(8):
            audit_log.record(f"action-{i}", AuditStatus.INFO)

        assert len(audit_log) == 5
        assert audit_log.evicted == 3
        assert [e.sequence for e in audit_log.entries()] == [4, 5, 6, 7, 8]

    def test_query(self, audit_log):
        """Test filtering by principal, status and action."""
        audit_log.record("Authentication Attempt", AuditStatus.INFO, "a@ztrust.io")
        audit_log.record("Access Denied", AuditStatus.FAILED, "b@ztrust.io")
        audit_log.record("Signal Adjusted", AuditStatus.INFO, "a@ztrust.io")

        assert [e.action for e in audit_log.query(principal="a@ztrust.io")] == [
            "Signal Adjusted",
            "Authentication Attempt",
        ]
        assert audit_log.query(status=AuditStatus.FAILED)[0].principal == "b@ztrust.io"
        assert audit_log.query(action="Missing") == []
        assert len(audit_log.query(limit=1)) == 1

    def test_handlers(self, audit_log):
        """Test handlers see every entry and their failures are contained."""
        seen = []

        def broken(entry):
            raise RuntimeError("listener down")

        audit_log.add_handler(broken)
        audit_log.add_handler(seen.append)

        entry = audit_log.record("Isolation Triggered", AuditStatus.WARNING)

        assert seen == [entry]

        audit_log.remove_handler(seen.append)
        audit_log.record("Session Terminated", AuditStatus.INFO)
        assert len(seen) == 1

    def test_stats(self, audit_log):
        audit_log.record("a", AuditStatus.INFO)
        audit_log.record("b", AuditStatus.WARNING)
        audit_log.record("c", AuditStatus.WARNING)

        stats = audit_log.get_stats()

        assert stats["WARNING"] == 2
        assert stats["INFO"] == 1
        assert stats["retained"] == 3
        assert stats["evicted"] == 0

    def test_to_dict(self, audit_log):
        entry = audit_log.record("Isolation Revoked", AuditStatus.SUCCESS, "admin@ztrust.io")
        data = entry.to_dict()

        assert data["status"] == "SUCCESS"
        assert data["sequence"] == 1
        assert data["details"] is None

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            AuditLog(max_entries=0)


# ============================================================================
# Trust Journal Tests
# ============================================================================


class TestTrustJournal:
    """Tests for the narrative journal."""

    def test_seeded(self):
        """Test the journal starts with one neutral entry."""
        journal = TrustJournal()

        assert len(journal) == 1
        assert journal.latest.impact == JournalImpact.LOW
        assert journal.latest.strength == 25

    def test_newest_first_and_capped(self):
        """Test entries are newest-first and capped."""
        journal = TrustJournal(max_entries=3)
        for strength in (60, 85, 100):
            journal.add(f"score {strength}", strength, high_impact=True)

        assert [e.strength for e in journal.entries()] == [100, 85, 60]
        assert journal.latest.impact == JournalImpact.HIGH
        assert len(journal.entries(limit=2)) == 2


# ============================================================================
# Restriction Registry Tests
# ============================================================================


class TestRestrictionRegistry:
    """Tests for the restriction registry."""

    def test_add_idempotent(self):
        registry = RestrictionRegistry()

        assert registry.add("demo@ztrust.io")
        assert not registry.add("demo@ztrust.io")
        assert len(registry) == 1
        assert registry.contains("demo@ztrust.io")

    def test_remove_idempotent(self):
        registry = RestrictionRegistry()
        registry.add("demo@ztrust.io")

        assert registry.remove("demo@ztrust.io")
        assert not registry.remove("demo@ztrust.io")
        assert "demo@ztrust.io" not in registry

    def test_iteration_order(self):
        registry = RestrictionRegistry()
        for identifier in ("c@ztrust.io", "a@ztrust.io", "b@ztrust.io"):
            registry.add(identifier)

        assert list(registry) == ["c@ztrust.io", "a@ztrust.io", "b@ztrust.io"]


# ============================================================================
# Breach Queue Tests
# ============================================================================


class TestBreachQueue:
    """Tests for the breach report queue."""

    def test_report_and_review(self):
        queue = BreachQueue()
        first = queue.report("Pastebin Leak", "2024-01-02", BreachSeverity.CRITICAL, "Dump", "a@ztrust.io")
        second = queue.report("ShadowForum", "2024-01-03", "MODERATE", "Token", "b@ztrust.io")

        assert queue.pending() == [first, second]
        assert second.severity == BreachSeverity.MODERATE

        assert queue.review(first.id) == first
        assert queue.pending() == [second]
        assert queue.reviewed_count == 1

    def test_review_unknown(self):
        queue = BreachQueue()
        with pytest.raises(UnknownBreachReportError):
            queue.review("missing")

    def test_invalid_severity(self):
        queue = BreachQueue()
        with pytest.raises(ValueError):
            queue.report("Collection #5", "2024-01-02", "LOW", "Dump", "a@ztrust.io")
