"""
ZTrust Session Controller

Owns the single session aggregate and drives it through the session state
machine:

    UNAUTHENTICATED -> VERIFYING_CREDENTIALS -> AWAITING_SECOND_FACTOR
        -> ACTIVE -> RESTRICTED -> (ACTIVE | UNAUTHENTICATED)

Transitions are synchronous methods executed on one event loop, so they
never interleave. Only the simulated delays and the advisory round trip
suspend, and both run after the state they depend on has been committed.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional, Tuple, Union

import structlog

from ztrust.advisory import (
    AdvisoryClient,
    AdvisoryService,
    ApiMetric,
    LocalAdvisoryService,
    MetricsRecorder,
    MetricsSink,
    MetricsSummary,
)
from ztrust.core.config import ZTrustConfig, get_config
from ztrust.security.audit import SYSTEM_PRINCIPAL, AuditLog, TrustJournal
from ztrust.security.breaches import BreachQueue
from ztrust.security.restrictions import RestrictionRegistry
from ztrust.security.scoring import TrustScoreAggregator
from ztrust.security.signals import SignalRegistry
from ztrust.security.timer import IsolationTimer, TimerState
from ztrust.security.types import (
    AdvisoryUnavailable,
    AuditStatus,
    BreachReport,
    BreachSeverity,
    JournalEntry,
    Principal,
    Role,
    SessionEvent,
    SessionState,
    SessionView,
    TrustScore,
    UnknownBreachReportError,
    UnknownSignalError,
)

logger = structlog.get_logger(__name__)

ADMINISTRATOR = "Administrator"


class SessionController:
    """
    Continuous-authentication session controller.

    Collaborators are injected so tests can substitute them:
    - ``advisor``: narrative text service (defaults to the local advisor)
    - ``metrics_sink``: receives one ``ApiMetric`` per advisory call
    - ``auto_tick``: run the isolation countdown on the event loop; when
      False the countdown is advanced by calling ``timer.tick()``
    """

    def __init__(
        self,
        config: Optional[ZTrustConfig] = None,
        advisor: Optional[AdvisoryService] = None,
        metrics_sink: Optional[MetricsSink] = None,
        auto_tick: bool = True,
    ) -> None:
        self.config = config or get_config()

        self.signals = SignalRegistry(self.config.trust.signals)
        self.aggregator = TrustScoreAggregator.from_config(self.config.trust)
        self.timer = IsolationTimer.from_config(
            self.config.isolation,
            on_fire=self._on_countdown_expired,
            auto_tick=auto_tick,
        )
        self.restrictions = RestrictionRegistry()
        self.audit = AuditLog(max_entries=self.config.audit.max_entries)
        self.journal = TrustJournal(
            max_entries=self.config.audit.journal_max_entries,
            initial_strength=self.aggregator.base,
        )
        self.breaches = BreachQueue()
        self.metrics = MetricsRecorder(max_metrics=self.config.advisory.metrics_window)

        advisory_config = self.config.advisory
        self._metrics_sink = metrics_sink
        self.advisory = AdvisoryClient.from_config(
            advisor or LocalAdvisoryService(
                latency=(advisory_config.latency_min, advisory_config.latency_max),
            ),
            advisory_config,
            metrics_sink=self._record_metric,
        )

        # Session aggregate
        self._state = SessionState.UNAUTHENTICATED
        self._principal: Optional[Principal] = None
        self._view: Optional[SessionView] = None
        self._score: TrustScore = self.aggregator.baseline
        self._session_epoch = 0

        self._transitions: Dict[Tuple[SessionState, SessionEvent], Callable[..., None]] = {
            (SessionState.UNAUTHENTICATED, SessionEvent.SUBMIT_CREDENTIALS): self._submit_credentials,
            (SessionState.VERIFYING_CREDENTIALS, SessionEvent.CREDENTIALS_VERIFIED): self._credentials_verified,
            (SessionState.AWAITING_SECOND_FACTOR, SessionEvent.SECOND_FACTOR_COMPLETED): self._second_factor_completed,
            (SessionState.ACTIVE, SessionEvent.ISOLATION_FIRED): self._isolate,
            (SessionState.ACTIVE, SessionEvent.LOGOUT): self._logout,
            (SessionState.RESTRICTED, SessionEvent.ACKNOWLEDGE): self._acknowledge,
        }

        self._logger = logger.bind(component="session_controller")

    # =========================================================================
    # Session Aggregate
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def view(self) -> Optional[SessionView]:
        return self._view

    @property
    def score(self) -> TrustScore:
        return self._score

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the whole session aggregate."""
        return {
            "state": self._state.value,
            "view": self._view.value if self._view else None,
            "principal": self._principal.to_dict() if self._principal else None,
            "score": self._score.to_dict(),
            "timer": self.timer.to_dict(),
            "signals": [s.to_dict() for s in self.signals],
            "restricted": list(self.restrictions),
            "pending_breaches": len(self.breaches),
        }

    # =========================================================================
    # State Machine
    # =========================================================================

    def dispatch(self, event: SessionEvent, **payload: Any) -> SessionState:
        """
        Apply one event to the session.

        Events without a transition from the current state leave the state
        untouched. A late isolation fire is dropped silently; anything else
        is recorded as an ignored event.
        """
        handler = self._transitions.get((self._state, event))
        if handler is None:
            if event == SessionEvent.ISOLATION_FIRED:
                self._logger.debug("Duplicate isolation suppressed", state=self._state.value)
            else:
                self._record(
                    "Event Ignored",
                    AuditStatus.WARNING,
                    f"{event.value} is not valid in {self._state.value}",
                )
            return self._state

        previous = self._state
        handler(**payload)
        self._logger.info(
            "Session transition",
            session_event=event.value,
            from_state=previous.value,
            to_state=self._state.value,
        )
        return self._state

    def _submit_credentials(self, identifier: str) -> None:
        if identifier in self.restrictions:
            self._principal = Principal(identifier, Role.USER)
            self._state = SessionState.RESTRICTED
            self._record("Access Denied", AuditStatus.FAILED, "Account is currently isolated")
            return

        self._principal = Principal(identifier, self._derive_role(identifier))
        self._state = SessionState.VERIFYING_CREDENTIALS
        self._record("Authentication Attempt", AuditStatus.INFO, f"Identifier: {identifier}")

    def _credentials_verified(self) -> None:
        self._state = SessionState.AWAITING_SECOND_FACTOR
        self._record(
            "Credentials Verified",
            AuditStatus.SUCCESS,
            f"Role resolved: {self._principal.role.value}",
        )

    def _second_factor_completed(self) -> None:
        self._enter_active()
        self._record(
            "2FA Verification",
            AuditStatus.SUCCESS,
            f"Multi-factor challenge completed, routed to {self._view.value}",
        )
        self._observe_score()

    def _isolate(self) -> None:
        identifier = self._principal.identifier
        self.restrictions.add(identifier)
        self._state = SessionState.RESTRICTED
        self._view = None
        self._record(
            "Isolation Triggered",
            AuditStatus.WARNING,
            f"Automatic isolation for {identifier} due to high risk score",
        )

    def _logout(self) -> None:
        self._record("Session Terminated", AuditStatus.INFO, "Manual logout performed")
        self._reset_session()

    def _acknowledge(self) -> None:
        if self._principal.identifier not in self.restrictions:
            self._enter_active()
            self._record("Restriction Acknowledged", AuditStatus.INFO, "User re-entering dashboard")
            self._observe_score()
        else:
            self._record("Isolation Finalized", AuditStatus.INFO, "User redirected to login")
            self._reset_session()

    def _enter_active(self) -> None:
        self._state = SessionState.ACTIVE
        self._view = (
            SessionView.ADMIN_CONSOLE if self._principal.is_admin else SessionView.USER_DASHBOARD
        )

    def _reset_session(self) -> None:
        self._session_epoch += 1
        self.timer.disarm()
        self.signals.reset()
        self._score = self.aggregator.baseline
        self._principal = None
        self._view = None
        self._state = SessionState.UNAUTHENTICATED

    def _derive_role(self, identifier: str) -> Role:
        # Simulation rule only; the identifier's shape is not a credential.
        return Role.ADMIN if self.config.session.admin_marker in identifier else Role.USER

    def _on_countdown_expired(self) -> None:
        self.dispatch(SessionEvent.ISOLATION_FIRED)

    # =========================================================================
    # Authentication Flow
    # =========================================================================

    def submit_credentials(self, identifier: str) -> SessionState:
        identifier = identifier.strip()
        if not identifier:
            raise ValueError("identifier must not be empty")
        return self.dispatch(SessionEvent.SUBMIT_CREDENTIALS, identifier=identifier)

    def confirm_credentials(self) -> SessionState:
        return self.dispatch(SessionEvent.CREDENTIALS_VERIFIED)

    def complete_second_factor(self) -> SessionState:
        return self.dispatch(SessionEvent.SECOND_FACTOR_COMPLETED)

    async def login(self, identifier: str) -> SessionState:
        """Submit credentials, then pass the simulated credential check."""
        state = self.submit_credentials(identifier)
        if state != SessionState.VERIFYING_CREDENTIALS:
            return state
        await asyncio.sleep(self.config.session.credential_check_delay)
        return self.confirm_credentials()

    async def verify_second_factor(self) -> SessionState:
        """Complete the second-factor challenge after the routing delay."""
        if self._state != SessionState.AWAITING_SECOND_FACTOR:
            return self.complete_second_factor()
        await asyncio.sleep(self.config.session.routing_delay)
        return self.complete_second_factor()

    def logout(self) -> SessionState:
        return self.dispatch(SessionEvent.LOGOUT)

    def acknowledge_restriction(self) -> SessionState:
        return self.dispatch(SessionEvent.ACKNOWLEDGE)

    # =========================================================================
    # Trust Evaluation
    # =========================================================================

    async def toggle_signal(self, signal_id: str) -> TrustScore:
        """
        Toggle a risk signal and recompute the trust score.

        The score, the countdown and the audit entry are committed before the
        advisory narrative is requested. Rejected toggles return the current
        score unchanged.
        """
        score = self.apply_toggle(signal_id)
        if score is not None:
            await self.refresh_advisory(score)
        return self._score

    def apply_toggle(self, signal_id: str) -> Optional[TrustScore]:
        """Synchronous part of a toggle. Returns None when the toggle was rejected."""
        if self._state != SessionState.ACTIVE:
            self._record(
                "Signal Toggle Rejected",
                AuditStatus.WARNING,
                f"{signal_id}: no active session",
            )
            return None

        try:
            signal = self.signals.toggle(signal_id)
        except UnknownSignalError as e:
            self._record("Signal Toggle Ignored", AuditStatus.WARNING, str(e))
            return None

        self._record(
            "Signal Adjusted",
            AuditStatus.INFO,
            f"{signal.name} -> {'ON' if signal.active else 'OFF'}",
        )
        self._score = self.aggregator.evaluate(self.signals)
        self._observe_score()
        return self._score

    def _observe_score(self) -> None:
        change = self.timer.observe(self._score)
        threshold = self.aggregator.high_risk_threshold
        if change == TimerState.ARMED:
            self._record(
                "Isolation Countdown Armed",
                AuditStatus.WARNING,
                f"Trust score {self._score.value} >= {threshold}, "
                f"isolation in {self.timer.remaining}s",
            )
        elif change == TimerState.DISARMED:
            self._record(
                "Isolation Countdown Cancelled",
                AuditStatus.INFO,
                f"Trust score {self._score.value} below {threshold}",
            )

    async def refresh_advisory(self, score: Optional[TrustScore] = None) -> Optional[JournalEntry]:
        """
        Request a narrative for ``score`` and record it in the journal.

        The audit entry is attributed to the principal that requested the
        narrative. If that session ended while the advisory was pending, the
        narrative is not journaled and None is returned.
        """
        score = score or self._score
        names = [self.signals.get(signal_id).name for signal_id in score.active_signals]
        requester = self._principal.identifier if self._principal else SYSTEM_PRINCIPAL
        epoch = self._session_epoch

        try:
            message = await self.advisory.advise(names, score.value)
            self._record("Trust Advisory", AuditStatus.INFO, message, principal=requester)
        except AdvisoryUnavailable as e:
            message = self.config.advisory.fallback_advice
            self._record("Advisory Unavailable", AuditStatus.INFO, str(e), principal=requester)

        if epoch != self._session_epoch:
            self._logger.info("Stale advisory discarded", principal=requester, strength=score.value)
            return None
        return self.journal.add(message, strength=score.value, high_impact=bool(names))

    # =========================================================================
    # Administration
    # =========================================================================

    def revoke_restriction(self, identifier: str, revoked_by: Optional[str] = None) -> bool:
        """Lift an isolation. Returns False when the principal was not restricted."""
        actor = revoked_by or self._admin_actor()
        if self.restrictions.remove(identifier):
            self._record(
                "Isolation Revoked",
                AuditStatus.SUCCESS,
                f"Admin manual revocation for {identifier}",
                principal=actor,
            )
            return True

        self._record(
            "Revocation Skipped",
            AuditStatus.INFO,
            f"{identifier} is not restricted",
            principal=actor,
        )
        return False

    def report_breach(
        self,
        source: str,
        date: str,
        severity: Union[BreachSeverity, str],
        description: str,
    ) -> Optional[BreachReport]:
        """Flag a breach for administrative review. Requires an active session."""
        if self._state != SessionState.ACTIVE:
            self._record("Threat Report Rejected", AuditStatus.WARNING, f"{source}: no active session")
            return None

        identifier = self._principal.identifier
        report = self.breaches.report(
            source=source,
            date=date,
            severity=severity,
            description=description,
            reporter=identifier,
        )
        self._record(
            "Threat Reported",
            AuditStatus.WARNING,
            f"User {identifier} reported breach: {source}",
        )
        return report

    def review_breach(self, report_id: str, reviewed_by: Optional[str] = None) -> Optional[BreachReport]:
        """Remove a report from the pending queue once reviewed."""
        actor = reviewed_by or self._admin_actor()
        try:
            report = self.breaches.review(report_id)
        except UnknownBreachReportError as e:
            self._record("Threat Review Ignored", AuditStatus.WARNING, str(e), principal=actor)
            return None

        self._record(
            "Threat Reviewed",
            AuditStatus.INFO,
            f"{report.source} reported by {report.reporter}",
            principal=actor,
        )
        return report

    async def summarize(self) -> str:
        """Administrator summary of recent activity."""
        recent = self.audit.recent(self.config.audit.summary_window)
        try:
            return await self.advisory.summarize(recent, self.breaches.pending())
        except AdvisoryUnavailable as e:
            self._record("Advisory Unavailable", AuditStatus.INFO, str(e))
            return self.config.advisory.fallback_summary

    def metrics_summary(self) -> MetricsSummary:
        return self.metrics.summary()

    async def shutdown(self) -> None:
        await self.timer.shutdown()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _admin_actor(self) -> str:
        if self._principal is not None and self._principal.is_admin:
            return self._principal.identifier
        return ADMINISTRATOR

    def _record(
        self,
        action: str,
        status: AuditStatus,
        details: Optional[str] = None,
        principal: Optional[str] = None,
    ) -> None:
        if principal is None and self._principal is not None:
            principal = self._principal.identifier
        self.audit.record(action, status, principal=principal, details=details)

    def _record_metric(self, metric: ApiMetric) -> None:
        self.metrics(metric)
        if self._metrics_sink is not None:
            try:
                self._metrics_sink(metric)
            except Exception as e:
                self._logger.error("Metrics sink error", endpoint=metric.endpoint, error=str(e))
