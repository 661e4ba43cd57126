"""
ZTrust Advisory Module

Narrative-text collaborator contracts, the bundled local advisor, the
instrumented client and call metrics.
"""

from ztrust.advisory.base import AdvisoryService, ApiMetric, MetricStatus, MetricsSink
from ztrust.advisory.client import AdvisoryClient
from ztrust.advisory.local import LocalAdvisoryService
from ztrust.advisory.metrics import MetricsRecorder, MetricsSummary

__all__ = [
    "AdvisoryService",
    "AdvisoryClient",
    "LocalAdvisoryService",
    "ApiMetric",
    "MetricStatus",
    "MetricsSink",
    "MetricsRecorder",
    "MetricsSummary",
]
