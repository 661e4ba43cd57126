"""
Restriction Registry.

Set of principals barred from normal access. Restrictions never expire on
their own; they are lifted only by administrative revocation.
"""

from __future__ import annotations

from typing import Iterator

import structlog

logger = structlog.get_logger(__name__)


class RestrictionRegistry:
    """Insertion-ordered set of restricted principal identifiers."""

    def __init__(self) -> None:
        self._restricted: dict[str, None] = {}

    def add(self, identifier: str) -> bool:
        """Restrict a principal. Returns False if already restricted."""
        if identifier in self._restricted:
            return False
        self._restricted[identifier] = None
        logger.info("Principal restricted", principal=identifier)
        return True

    def remove(self, identifier: str) -> bool:
        """Lift a restriction. Returns False if the principal was not restricted."""
        if identifier not in self._restricted:
            return False
        del self._restricted[identifier]
        logger.info("Restriction lifted", principal=identifier)
        return True

    def contains(self, identifier: str) -> bool:
        return identifier in self._restricted

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._restricted

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._restricted))

    def __len__(self) -> int:
        return len(self._restricted)
