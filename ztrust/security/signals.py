"""
Risk Signal Registry.

Holds the canonical, insertion-ordered set of risk signals for a session.
Only the ``active`` flag of a signal ever changes.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator, Optional

import structlog

from ztrust.core.config import DEFAULT_SIGNALS, SignalDefinition
from ztrust.security.types import Signal, UnknownSignalError

logger = structlog.get_logger(__name__)


class SignalRegistry:
    """
    Ordered registry of risk signals keyed by id.

    Signals are stored as immutable snapshots; toggling replaces the stored
    snapshot, so callers never observe a signal changing under them.
    """

    def __init__(self, definitions: Optional[Iterable[SignalDefinition]] = None):
        self._signals: dict[str, Signal] = {}
        for definition in definitions if definitions is not None else DEFAULT_SIGNALS:
            if definition.id in self._signals:
                raise ValueError(f"Duplicate signal id: {definition.id}")
            self._signals[definition.id] = Signal(
                id=definition.id,
                name=definition.name,
                category=definition.category,
                impact=definition.impact,
                icon=definition.icon,
            )
        self._logger = logger.bind(component="signal_registry")

    def __len__(self) -> int:
        return len(self._signals)

    def __iter__(self) -> Iterator[Signal]:
        return iter(list(self._signals.values()))

    def __contains__(self, signal_id: object) -> bool:
        return signal_id in self._signals

    def get(self, signal_id: str) -> Signal:
        """Get a signal by id."""
        try:
            return self._signals[signal_id]
        except KeyError:
            raise UnknownSignalError(signal_id) from None

    def signals(self) -> list[Signal]:
        """Snapshot of all signals in registry order."""
        return list(self._signals.values())

    def active(self) -> list[Signal]:
        return [s for s in self._signals.values() if s.active]

    def active_names(self) -> list[str]:
        return [s.name for s in self._signals.values() if s.active]

    def toggle(self, signal_id: str) -> Signal:
        """Flip a signal's active flag and return the new snapshot."""
        current = self.get(signal_id)
        updated = replace(current, active=not current.active)
        self._signals[signal_id] = updated
        self._logger.debug("Signal toggled", signal_id=signal_id, active=updated.active)
        return updated

    def reset(self) -> None:
        """Set every signal inactive."""
        for signal_id, signal in self._signals.items():
            if signal.active:
                self._signals[signal_id] = replace(signal, active=False)
