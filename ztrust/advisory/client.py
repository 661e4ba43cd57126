"""
Instrumented advisory client.

Wraps an ``AdvisoryService`` with retries, an overall timeout and metrics
emission. Every failure surfaces as ``AdvisoryUnavailable`` so callers have
exactly one error to recover from.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional, Sequence

import structlog
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from ztrust.advisory.base import AdvisoryService, ApiMetric, MetricStatus, MetricsSink
from ztrust.core.config import AdvisoryConfig
from ztrust.security.types import AdvisoryUnavailable, AuditEntry, BreachReport

logger = structlog.get_logger(__name__)

ENDPOINT_PREFIX = "LocalAuth"


class AdvisoryClient:
    """Timeout- and metrics-aware front for an advisory service."""

    def __init__(
        self,
        service: AdvisoryService,
        timeout: float = 3.0,
        max_attempts: int = 2,
        metrics_sink: Optional[MetricsSink] = None,
    ) -> None:
        self.service = service
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.metrics_sink = metrics_sink
        self._logger = logger.bind(component="advisory_client")

    @classmethod
    def from_config(
        cls,
        service: AdvisoryService,
        config: Optional[AdvisoryConfig] = None,
        metrics_sink: Optional[MetricsSink] = None,
    ) -> "AdvisoryClient":
        config = config or AdvisoryConfig()
        return cls(
            service,
            timeout=config.timeout,
            max_attempts=config.max_attempts,
            metrics_sink=metrics_sink,
        )

    async def advise(self, active_signal_names: Sequence[str], score: int) -> str:
        return await self._call(
            "analyzeTrustSignals",
            lambda: self.service.advise(list(active_signal_names), score),
        )

    async def summarize(
        self,
        recent_logs: Sequence[AuditEntry],
        recent_breaches: Sequence[BreachReport],
    ) -> str:
        return await self._call(
            "getSOCAdvice",
            lambda: self.service.summarize(list(recent_logs), list(recent_breaches)),
        )

    async def _call(self, operation: str, action: Callable[[], Awaitable[str]]) -> str:
        endpoint = f"{ENDPOINT_PREFIX}:{operation}"
        start = time.perf_counter()

        try:
            result = await asyncio.wait_for(self._with_retries(action), timeout=self.timeout)
        except asyncio.TimeoutError:
            self._emit(endpoint, start, MetricStatus.ERROR)
            self._logger.warning("Advisory call timed out", endpoint=endpoint, timeout=self.timeout)
            raise AdvisoryUnavailable(endpoint, f"timed out after {self.timeout}s") from None
        except Exception as e:
            self._emit(endpoint, start, MetricStatus.ERROR)
            self._logger.warning("Advisory call failed", endpoint=endpoint, error=str(e))
            raise AdvisoryUnavailable(endpoint, str(e) or type(e).__name__) from e

        self._emit(endpoint, start, MetricStatus.SUCCESS)
        return result

    async def _with_retries(self, action: Callable[[], Awaitable[str]]) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.1, min=0, max=1),
            reraise=True,
        ):
            with attempt:
                result = await action()
                if not isinstance(result, str):
                    raise TypeError(f"advisory returned {type(result).__name__}, expected str")
                return result
        raise RuntimeError("unreachable")

    def _emit(self, endpoint: str, start: float, status: MetricStatus) -> None:
        if self.metrics_sink is None:
            return
        metric = ApiMetric(
            endpoint=endpoint,
            duration_ms=(time.perf_counter() - start) * 1000,
            status=status,
        )
        try:
            self.metrics_sink(metric)
        except Exception as e:
            self._logger.error("Metrics sink error", endpoint=endpoint, error=str(e))
