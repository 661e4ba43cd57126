"""ZTrust core: configuration and logging."""

from ztrust.core.config import (
    ZTrustConfig,
    get_config,
    reset_config,
    set_config,
)
from ztrust.core.logging import configure_logging

__all__ = [
    "ZTrustConfig",
    "get_config",
    "set_config",
    "reset_config",
    "configure_logging",
]
