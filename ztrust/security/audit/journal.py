"""
Trust Journal

Newest-first narrative history of advisory messages produced after each
trust score recomputation.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from ztrust.security.types import JournalEntry, JournalImpact

INITIAL_NARRATIVE = (
    "Your session is secured by continuous identity verification "
    "and standard behavioral monitoring."
)


class TrustJournal:
    """Bounded journal of advisory narratives."""

    def __init__(self, max_entries: int = 50, initial_strength: int = 25):
        self.max_entries = max_entries
        self._entries: Deque[JournalEntry] = deque(maxlen=max_entries)
        self._entries.appendleft(
            JournalEntry(
                impact=JournalImpact.LOW,
                message=INITIAL_NARRATIVE,
                strength=initial_strength,
            )
        )

    def add(self, message: str, strength: int, high_impact: bool) -> JournalEntry:
        entry = JournalEntry(
            impact=JournalImpact.HIGH if high_impact else JournalImpact.LOW,
            message=message,
            strength=strength,
        )
        # newest at the left; deque drops the oldest from the right
        self._entries.appendleft(entry)
        return entry

    def entries(self, limit: Optional[int] = None) -> List[JournalEntry]:
        """Entries newest-first."""
        items = list(self._entries)
        return items[:limit] if limit is not None else items

    @property
    def latest(self) -> JournalEntry:
        return self._entries[0]

    def __len__(self) -> int:
        return len(self._entries)
