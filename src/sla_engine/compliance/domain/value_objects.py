"""
Compliance Value Objects
=========================

Immutable value objects and stateless calculators for the compliance domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.

Evaluation chain for one ticket:
    PolicyResolver -> DeadlineCalculator -> StatusClassifier
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sla_engine.config import (
    CLOSED_STATUSES, DeadlineSource, FALLBACK_PRIORITY, Priority,
    SYSTEM_DEFAULT_POLICY_HOURS, VALID_PRIORITIES,
)
from sla_engine.core import InvalidWindowException
from sla_engine.compliance.domain.entities import Ticket, TicketClassification


class Policy(BaseModel):
    """
    Sector SLA policy: hours allowed to resolve a ticket, per priority.

    Any hour budget may be missing; lookups then anchor to this policy's
    own P3 budget.
    """
    model_config = ConfigDict(frozen=True)

    sector_id: str = Field(..., min_length=1, description="Sector the policy applies to")
    sector_name: Optional[str] = Field(None, description="Display name of the sector")
    p0_hours: Optional[float] = Field(None, gt=0)
    p1_hours: Optional[float] = Field(None, gt=0)
    p2_hours: Optional[float] = Field(None, gt=0)
    p3_hours: Optional[float] = Field(None, gt=0)

    def hours_for(self, priority: str) -> Optional[float]:
        """Hour budget for a known priority, None when the field is absent."""
        return {
            Priority.P0: self.p0_hours,
            Priority.P1: self.p1_hours,
            Priority.P2: self.p2_hours,
            Priority.P3: self.p3_hours,
        }.get(priority)


class PolicyConfig(BaseModel):
    """
    Sector policy set loaded from YAML.

    This is a value object - immutable and defined by its attributes.
    """
    policies: List[Policy] = Field(default_factory=list, description="Sector policies")

    @field_validator("policies")
    @classmethod
    def validate_unique_sectors(cls, v: List[Policy]) -> List[Policy]:
        """Keep the last policy declared for each sector."""
        by_sector: Dict[str, Policy] = {}
        for policy in v:
            by_sector[policy.sector_id] = policy
        return list(by_sector.values())

    def get_policy(self, sector_id: str) -> Optional[Policy]:
        for policy in self.policies:
            if policy.sector_id == sector_id:
                return policy
        return None


class PolicyResolver:
    """
    Resolves the allowed resolution window (hours) for a sector and priority.

    Precedence:
    1. The sector's policy budget for the priority; a missing budget falls
       back to the same policy's P3 budget.
    2. The system default policy for the priority.

    Unknown priorities are looked up as P3. A sector without a policy is a
    normal case, never an error.
    """

    def __init__(self, policies: Iterable[Policy] = ()):
        self._policies: Dict[str, Policy] = {p.sector_id: p for p in policies}

    @property
    def policies(self) -> List[Policy]:
        return list(self._policies.values())

    def get_policy(self, sector_id: Optional[str]) -> Optional[Policy]:
        if not sector_id:
            return None
        return self._policies.get(sector_id)

    def resolve(self, sector_id: Optional[str], priority: str) -> float:
        lookup_priority = priority if priority in VALID_PRIORITIES else FALLBACK_PRIORITY

        policy = self.get_policy(sector_id)
        if policy is not None:
            hours = policy.hours_for(lookup_priority)
            if hours is None:
                hours = policy.p3_hours
            if hours is not None:
                return hours

        return SYSTEM_DEFAULT_POLICY_HOURS[lookup_priority]


class DeadlineCalculator:
    """
    Turns a ticket and its policy hours into an absolute deadline.

    Wall-clock hours only: no business-hours or holiday calendar.
    """

    @staticmethod
    def compute_deadline(ticket: Ticket, hours: float) -> Optional[datetime]:
        """
        Calculate the binding deadline for a ticket.

        An explicit deadline always wins over the policy. Without one the
        deadline is `created_at + hours`; None only when the ticket has no
        usable creation time.
        """
        if ticket.explicit_deadline is not None:
            return ticket.explicit_deadline
        if ticket.created_at is None:
            return None
        return ticket.created_at + timedelta(hours=hours)

    @staticmethod
    def deadline_source(ticket: Ticket) -> Optional[str]:
        if ticket.explicit_deadline is not None:
            return DeadlineSource.EXPLICIT
        if ticket.created_at is None:
            return None
        return DeadlineSource.POLICY


class StatusClassifier:
    """
    Pure functions classifying a ticket against its deadline.

    Resolved/closed tickets are judged at `resolved_at`; compliance is
    inclusive, so resolving exactly at the deadline is compliant. Open and
    in-progress tickets are judged at the reference instant `now`.
    """

    @staticmethod
    def is_compliant(ticket: Ticket, deadline: Optional[datetime]) -> Optional[bool]:
        """
        Whether a finished ticket met its deadline.

        Returns None for tickets that are not resolved/closed. A finished
        ticket missing its resolution time or deadline cannot be shown
        compliant and counts as breached.
        """
        if ticket.status not in CLOSED_STATUSES:
            return None
        if ticket.resolved_at is None or deadline is None:
            return False
        return ticket.resolved_at <= deadline

    @staticmethod
    def is_overdue(ticket: Ticket, deadline: Optional[datetime], now: datetime) -> bool:
        if deadline is None:
            return False

        if ticket.status in CLOSED_STATUSES:
            if ticket.resolved_at is None:
                return False
            # Closed on time short-circuits even when now is past the deadline
            return ticket.resolved_at > deadline

        return now > deadline

    @staticmethod
    def remaining_seconds(deadline: Optional[datetime], now: datetime) -> Optional[float]:
        """Seconds left before the deadline, negative once it has passed."""
        if deadline is None:
            return None
        return (deadline - now).total_seconds()

    @classmethod
    def classify(
        cls,
        ticket: Ticket,
        resolver: PolicyResolver,
        now: datetime
    ) -> TicketClassification:
        """Run the full resolve -> deadline -> classify chain for one ticket."""
        hours = resolver.resolve(ticket.sector_id, ticket.priority)
        deadline = DeadlineCalculator.compute_deadline(ticket, hours)

        return TicketClassification(
            ticket_id=ticket.id,
            priority=ticket.priority,
            status=ticket.status,
            deadline=deadline,
            deadline_source=DeadlineCalculator.deadline_source(ticket),
            policy_hours=hours,
            is_overdue=cls.is_overdue(ticket, deadline, now),
            is_compliant=cls.is_compliant(ticket, deadline),
            remaining_seconds=cls.remaining_seconds(deadline, now),
        )


@dataclass(frozen=True)
class Window:
    """
    Half-open time interval [start, end) used to select tickets.

    Immutable value object; `previous()` gives the equal-length window
    immediately before it.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidWindowException(self.start, self.end)

    @classmethod
    def last_days(cls, now: datetime, days: int) -> "Window":
        """Window covering the `days` days up to `now`."""
        return cls(start=now - timedelta(days=days), end=now)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: Optional[datetime]) -> bool:
        if instant is None:
            return False
        return self.start <= instant < self.end

    def previous(self) -> "Window":
        return Window(start=self.start - self.duration, end=self.start)

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}

