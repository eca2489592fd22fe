"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="sla-compliance-engine", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== SLA Policies ==========
    sla_policy_path: Path = Field(
        default=Path("sla_policies.yaml"),
        description="Path to the sector SLA policy YAML file"
    )
    watch_policy_file: bool = Field(
        default=True,
        description="Reload the policy file when it changes on disk"
    )

    # ========== Reporting ==========
    default_period_days: int = Field(
        default=30,
        description="Report window length when the request names none",
        ge=1
    )
    reporting_floor: Optional[datetime] = Field(
        default=None,
        description="Tickets created before this instant are never selected into a window"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Priority(str):
    """Ticket priority levels. P0 is the most urgent."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class TicketStatus(str):
    """Ticket lifecycle statuses."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class DeadlineSource(str):
    """Where a ticket's binding deadline came from."""
    EXPLICIT = "explicit"
    POLICY = "policy"


class TrendDirection(str):
    """Direction badge for a period-over-period delta."""
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class DataQualityIssueKind(str):
    """Kinds of structurally invalid ticket input."""
    MALFORMED_TIMESTAMP = "malformed_timestamp"
    UNKNOWN_PRIORITY = "unknown_priority"
    UNKNOWN_STATUS = "unknown_status"
    MISSING_RESOLVED_AT = "missing_resolved_at"
    INVERTED_RESOLUTION_INTERVAL = "inverted_resolution_interval"


# ========== Lists for validation ==========

VALID_PRIORITIES = [Priority.P0, Priority.P1, Priority.P2, Priority.P3]
VALID_STATUSES = [
    TicketStatus.OPEN, TicketStatus.IN_PROGRESS,
    TicketStatus.RESOLVED, TicketStatus.CLOSED
]
ACTIVE_STATUSES = (TicketStatus.OPEN, TicketStatus.IN_PROGRESS)
CLOSED_STATUSES = (TicketStatus.RESOLVED, TicketStatus.CLOSED)
VALID_TREND_DIRECTIONS = [TrendDirection.UP, TrendDirection.DOWN, TrendDirection.FLAT]

# Hours allowed to resolve a ticket when its sector has no policy
SYSTEM_DEFAULT_POLICY_HOURS: Dict[str, int] = {
    Priority.P0: 4,
    Priority.P1: 24,
    Priority.P2: 72,
    Priority.P3: 168,
}

# Priority used for policy lookup when a ticket carries an unknown one
FALLBACK_PRIORITY = Priority.P3

NO_TAG_BUCKET = "no_tag"
UNASSIGNED_SECTOR = "unassigned"
ALL_SECTORS_LABEL = "all"
CUSTOM_PERIOD_LABEL = "custom"

PERIOD_PRESETS: Dict[str, int] = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
}
