"""
Compliance Domain Entities
===========================

Pure Python domain entities for SLA deadline and compliance evaluation.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns. The engine only
reads tickets; it never mutates them, so tickets are frozen snapshots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

from sla_engine.config import (
    ACTIVE_STATUSES, CLOSED_STATUSES, VALID_PRIORITIES, VALID_STATUSES,
    NO_TAG_BUCKET, UNASSIGNED_SECTOR,
)
from sla_engine.compliance.domain.formatting import format_countdown


@dataclass(frozen=True)
class Ticket:
    """
    Ticket entity as seen by the compliance engine.

    `priority` and `status` are kept as raw strings so that values outside
    the known sets survive into raw counts instead of being dropped.
    `invalid_fields` names timestamp fields whose source value could not be
    parsed (the parsed attribute is then None).
    """

    id: str
    priority: str
    status: str
    created_at: Optional[datetime]

    sector_id: Optional[str] = None
    team: Optional[str] = None

    # Lifecycle timestamps
    first_in_progress_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    # Operator-set override that supersedes the policy deadline
    explicit_deadline: Optional[datetime] = None

    tags: Tuple[str, ...] = ()
    invalid_fields: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_closed(self) -> bool:
        """Check if ticket reached resolved or closed."""
        return self.status in CLOSED_STATUSES

    @property
    def is_active(self) -> bool:
        """Check if ticket is still open or in progress."""
        return self.status in ACTIVE_STATUSES

    @property
    def has_known_priority(self) -> bool:
        return self.priority in VALID_PRIORITIES

    @property
    def has_known_status(self) -> bool:
        return self.status in VALID_STATUSES

    @property
    def primary_tag(self) -> str:
        """First tag of the ticket, or the no-tag bucket."""
        return self.tags[0] if self.tags else NO_TAG_BUCKET

    @property
    def sector_key(self) -> str:
        """Grouping key for per-sector breakdowns (team when sector is absent)."""
        return self.sector_id or self.team or UNASSIGNED_SECTOR

    @property
    def lead_time_seconds(self) -> Optional[float]:
        """Seconds from creation to resolution, None when not measurable."""
        if self.created_at is None or self.resolved_at is None:
            return None
        if self.resolved_at < self.created_at:
            return None
        return (self.resolved_at - self.created_at).total_seconds()

    @property
    def work_time_seconds(self) -> Optional[float]:
        """Seconds from first in-progress transition to resolution."""
        if self.first_in_progress_at is None or self.resolved_at is None:
            return None
        if self.resolved_at < self.first_in_progress_at:
            return None
        return (self.resolved_at - self.first_in_progress_at).total_seconds()


@dataclass(frozen=True)
class TicketClassification:
    """
    SLA classification of a single ticket at a reference instant.

    `is_compliant` is only meaningful for resolved/closed tickets and is
    None for every other status. `deadline` is None when neither an explicit
    deadline nor a creation time is available.
    """

    ticket_id: str
    priority: str
    status: str
    deadline: Optional[datetime]
    deadline_source: Optional[str]
    policy_hours: float
    is_overdue: bool
    is_compliant: Optional[bool]
    remaining_seconds: Optional[float] = None

    @property
    def countdown(self) -> Optional[str]:
        """Countdown label for active tickets."""
        if self.remaining_seconds is None or self.is_compliant is not None:
            return None
        return format_countdown(self.remaining_seconds)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "ticket_id": self.ticket_id,
            "priority": self.priority,
            "status": self.status,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "deadline_source": self.deadline_source,
            "policy_hours": self.policy_hours,
            "is_overdue": self.is_overdue,
            "is_compliant": self.is_compliant,
            "remaining_seconds": self.remaining_seconds,
            "countdown": self.countdown,
        }


@dataclass(frozen=True)
class DataQualityIssue:
    """A structurally invalid piece of ticket input, surfaced as a warning."""

    ticket_id: str
    kind: str
    field: str
    detail: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "kind": self.kind,
            "field": self.field,
            "detail": self.detail,
        }
