"""
ZTrust Logging Setup

Structured logging through structlog on top of the stdlib logging backend.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from ztrust.core.config import LoggingConfig, get_config


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure structlog processors and the root stdlib handler."""
    config = config or get_config().logging
    level = getattr(logging, config.level.value)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )

    if config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
