"""
ZTrust Configuration Management

Centralized configuration for the trust/session core with:
- Environment-based configuration
- Type-safe settings with Pydantic
- JSON file loading and saving
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    """Logging levels for ZTrust."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SignalDefinition(BaseModel):
    """Static definition of a risk signal."""
    id: str
    name: str
    category: str
    impact: int
    icon: str = ""


DEFAULT_SIGNALS: list[SignalDefinition] = [
    SignalDefinition(id="wifi", name="Public WiFi", category="NETWORK HEALTH", impact=35, icon="wifi"),
    SignalDefinition(id="geo", name="Unusual Geo", category="GEOFENCING", impact=45, icon="globe"),
    SignalDefinition(id="bot", name="Bot Pattern", category="USER BEHAVIOR", impact=60, icon="zap"),
]


class TrustConfig(BaseModel):
    """Configuration for trust scoring."""
    base_score: int = 25
    high_risk_threshold: int = 90
    max_score: int = 100
    signals: list[SignalDefinition] = Field(
        default_factory=lambda: [s.model_copy() for s in DEFAULT_SIGNALS]
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "TrustConfig":
        if not 0 <= self.base_score <= self.max_score:
            raise ValueError("base_score must lie within [0, max_score]")
        if not 0 < self.high_risk_threshold <= self.max_score:
            raise ValueError("high_risk_threshold must lie within (0, max_score]")
        return self


class IsolationConfig(BaseModel):
    """Configuration for the automatic isolation countdown."""
    countdown_seconds: int = Field(default=10, ge=1)
    tick_interval: float = Field(default=1.0, gt=0)  # seconds per countdown step


class SessionConfig(BaseModel):
    """Configuration for the session workflow."""
    credential_check_delay: float = 2.0  # simulated credential check, seconds
    routing_delay: float = 1.5  # simulated dashboard routing, seconds
    admin_marker: str = "admin"


class AuditConfig(BaseModel):
    """Configuration for the audit trail and trust journal."""
    max_entries: int = Field(default=500, ge=1)
    journal_max_entries: int = Field(default=50, ge=1)
    summary_window: int = 20  # most recent entries handed to the summarizer


class AdvisoryConfig(BaseModel):
    """Configuration for the advisory text collaborator."""
    timeout: float = 3.0  # covers every attempt of one call
    max_attempts: int = Field(default=2, ge=1)
    latency_min: float = 0.3
    latency_max: float = 0.8
    metrics_window: int = 100
    fallback_advice: str = (
        "Your session is secured by standard monitoring and continuous identity verification."
    )
    fallback_summary: str = (
        "Advisory summary unavailable. Review the audit trail and pending reports manually."
    )

    @field_validator("latency_max")
    @classmethod
    def check_latency(cls, v: float, info: ValidationInfo) -> float:
        low = info.data.get("latency_min", 0.0)
        if v < low:
            raise ValueError("latency_max must be >= latency_min")
        return v


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""
    level: LogLevel = LogLevel.INFO
    format: Literal["json", "text"] = "text"


class ZTrustConfig(BaseSettings):
    """
    Main ZTrust Configuration

    Loads configuration from environment variables and/or config files.
    Environment variables are prefixed with ZTRUST_
    (e.g., ZTRUST_ISOLATION__COUNTDOWN_SECONDS=5).
    """

    instance_id: str = Field(default="ztrust-console")

    trust: TrustConfig = Field(default_factory=TrustConfig)
    isolation: IsolationConfig = Field(default_factory=IsolationConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "ZTRUST_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @classmethod
    def from_file(cls, config_path: Path) -> "ZTrustConfig":
        """Load configuration from a JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            config_data = json.load(f)

        return cls(**config_data)

    def to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)


# Global configuration instance (lazy loaded)
_config: Optional[ZTrustConfig] = None


def get_config() -> ZTrustConfig:
    """Get the global ZTrust configuration instance."""
    global _config
    if _config is None:
        _config = ZTrustConfig()
    return _config


def set_config(config: ZTrustConfig) -> None:
    """Set the global ZTrust configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration to default."""
    global _config
    _config = None
