"""
ZTrust - Continuous Authentication Session Core

Simulated zero-trust console core with:
- Risk signal aggregation into a bounded trust score
- Automatic, re-armable isolation countdown
- Session state machine across authentication stages and isolation
- Append-only, bounded audit trail
"""

__version__ = "1.0.0"
__author__ = "ZTrust Team"

from ztrust.core.config import ZTrustConfig
from ztrust.session.controller import SessionController

__all__ = ["SessionController", "ZTrustConfig", "__version__"]
