"""
Isolation Timer.

Countdown that arms when the trust score becomes HIGH_RISK and fires an
isolation callback when it reaches zero. Dropping back to NORMAL disarms it
without firing.

Every arm, disarm and fire bumps a generation counter. A scheduled tick
carries the generation it was scheduled under and is discarded if the
generation has moved on, so a countdown that was cancelled (or replaced by
a fresh one) can never decrement or fire.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Optional

import structlog

from ztrust.core.config import IsolationConfig
from ztrust.security.types import TrustScore

logger = structlog.get_logger(__name__)


class TimerState(str, Enum):
    """Countdown states."""
    DISARMED = "DISARMED"
    ARMED = "ARMED"


class IsolationTimer:
    """
    Re-armable, fire-once-per-arm isolation countdown.

    With ``auto_tick`` enabled the countdown runs as an asyncio task on the
    running loop, ticking every ``tick_interval`` seconds. Without it (or
    with no running loop) ticks are driven by calling ``tick()``. ``ticking``
    reports whether a scheduled task is currently driving the countdown.
    """

    def __init__(
        self,
        countdown_seconds: int = 10,
        tick_interval: float = 1.0,
        on_fire: Optional[Callable[[], None]] = None,
        auto_tick: bool = True,
    ) -> None:
        if countdown_seconds < 1:
            raise ValueError("countdown_seconds must be at least 1")
        self.countdown_seconds = countdown_seconds
        self.tick_interval = tick_interval
        self.on_fire = on_fire
        self.auto_tick = auto_tick

        self._remaining: Optional[int] = None
        self._generation = 0
        self._fired_count = 0
        self._task: Optional[asyncio.Task] = None
        self._logger = logger.bind(component="isolation_timer")

    @classmethod
    def from_config(
        cls,
        config: Optional[IsolationConfig] = None,
        on_fire: Optional[Callable[[], None]] = None,
        auto_tick: bool = True,
    ) -> "IsolationTimer":
        config = config or IsolationConfig()
        return cls(
            countdown_seconds=config.countdown_seconds,
            tick_interval=config.tick_interval,
            on_fire=on_fire,
            auto_tick=auto_tick,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> TimerState:
        return TimerState.ARMED if self._remaining is not None else TimerState.DISARMED

    @property
    def armed(self) -> bool:
        return self._remaining is not None

    @property
    def remaining(self) -> Optional[int]:
        return self._remaining

    @property
    def ticking(self) -> bool:
        """True while a scheduled task is driving the countdown."""
        return self._task is not None and not self._task.done()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fired_count(self) -> int:
        return self._fired_count

    # =========================================================================
    # Transitions
    # =========================================================================

    def observe(self, score: TrustScore) -> Optional[TimerState]:
        """
        React to a recomputed score.

        Returns the new state when the observation changed it, else None.
        """
        if score.is_high_risk:
            return TimerState.ARMED if self.arm() else None
        return TimerState.DISARMED if self.disarm() else None

    def arm(self) -> bool:
        """Start a fresh countdown. No-op while already armed."""
        if self.armed:
            return False

        self._generation += 1
        self._remaining = self.countdown_seconds
        self._logger.info(
            "Isolation countdown armed",
            remaining=self._remaining,
            generation=self._generation,
        )

        if self.auto_tick:
            self._schedule(self._generation)
        return True

    def disarm(self) -> bool:
        """Cancel the countdown without firing. No-op while disarmed."""
        if not self.armed:
            return False

        self._generation += 1
        remaining = self._remaining
        self._remaining = None
        self._cancel_task()
        self._logger.info("Isolation countdown cancelled", remaining=remaining)
        return True

    def tick(self, generation: Optional[int] = None) -> bool:
        """
        Advance the countdown by one step.

        ``generation`` identifies the countdown the tick was scheduled for;
        ticks from an older generation are ignored. Returns True when the
        tick was applied.
        """
        if not self.armed:
            return False
        if generation is not None and generation != self._generation:
            self._logger.debug(
                "Stale tick discarded",
                tick_generation=generation,
                generation=self._generation,
            )
            return False

        self._remaining -= 1
        self._logger.debug("Isolation countdown tick", remaining=self._remaining)

        if self._remaining <= 0:
            self._fire()
        return True

    def _fire(self) -> None:
        self._generation += 1
        self._remaining = None
        self._task = None
        self._fired_count += 1
        self._logger.warning("Isolation countdown expired", generation=self._generation)

        if self.on_fire is not None:
            self.on_fire()

    # =========================================================================
    # Scheduling
    # =========================================================================

    def _schedule(self, generation: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning(
                "No running event loop, countdown must be ticked manually",
                generation=generation,
            )
            return
        self._task = loop.create_task(self._run(generation))

    async def _run(self, generation: int) -> None:
        try:
            while self._generation == generation and self.armed:
                await asyncio.sleep(self.tick_interval)
                if self._generation != generation:
                    return
                self.tick(generation)
        except asyncio.CancelledError:
            if self._generation == generation and self.armed:
                self._logger.warning(
                    "Countdown task cancelled while armed",
                    remaining=self._remaining,
                    generation=generation,
                )
            raise
        except Exception as e:
            self._logger.error("Isolation countdown failed", error=str(e), exc_info=True)

    def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def shutdown(self) -> None:
        """Disarm and wait for any scheduled countdown task to finish."""
        task = self._task
        self.disarm()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "remaining": self._remaining,
            "generation": self._generation,
            "ticking": self.ticking,
        }
