"""
Compliance Application DTOs
============================

Data Transfer Objects for the compliance API layer.

These Pydantic models handle serialization/deserialization and validation
for API requests and responses. Timestamps on ticket records are accepted
leniently: an unparseable value does not reject the request, it is carried
to the engine as a missing value and reported as a data-quality issue.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator, model_validator

from sla_engine.compliance.domain import Policy, Ticket
from sla_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

TimestampInput = Optional[Union[datetime, str]]

_datetime_adapter = TypeAdapter(datetime)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC so all instants are comparable."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_instant(value: Any) -> Tuple[Optional[datetime], bool]:
    """
    Parse a timestamp from a ticket record.

    Returns:
        Tuple of (instant or None, whether the raw value was usable).
        Absent values are usable; unparseable ones are not.
    """
    if value is None or value == "":
        return None, True
    try:
        return ensure_utc(_datetime_adapter.validate_python(value)), True
    except ValidationError:
        return None, False


# ========== Request DTOs ==========

class TicketRecordDTO(BaseModel):
    """Ticket record as delivered by the ticket store."""
    id: str = Field(..., min_length=1, description="Opaque ticket ID")
    priority: str = Field(..., description="P0..P3; other values are kept as their own bucket")
    status: str = Field(default="open", description="open, in_progress, resolved or closed")
    sector_id: Optional[str] = Field(None, description="Owning sector")
    team: Optional[str] = Field(None, description="Team label used when sector is absent")
    created_at: TimestampInput = Field(None, description="Creation timestamp")
    first_in_progress_at: TimestampInput = Field(None, description="First move to in_progress")
    resolved_at: TimestampInput = Field(None, description="Resolution timestamp")
    explicit_deadline: TimestampInput = Field(None, description="Operator-set deadline override")
    tags: List[str] = Field(default_factory=list, description="Tags; the first one is primary")

    def to_domain(self) -> Ticket:
        """Convert to domain entity, recording unparseable timestamps."""
        parsed: Dict[str, Optional[datetime]] = {}
        invalid = set()
        for name in ("created_at", "first_in_progress_at", "resolved_at", "explicit_deadline"):
            instant, usable = parse_instant(getattr(self, name))
            parsed[name] = instant
            if not usable:
                invalid.add(name)

        return Ticket(
            id=self.id,
            priority=self.priority,
            status=self.status,
            sector_id=self.sector_id or None,
            team=self.team or None,
            tags=tuple(self.tags),
            invalid_fields=frozenset(invalid),
            **parsed
        )


class ComplianceRequest(BaseModel):
    """Tickets plus optional policy overrides and reference instant."""
    tickets: List[TicketRecordDTO] = Field(..., description="Tickets to evaluate")
    policies: Optional[List[Policy]] = Field(
        None,
        description="Sector policies; the configured policy file is used when omitted"
    )
    now: Optional[datetime] = Field(None, description="Reference instant; server clock when omitted")

    @field_validator("policies")
    @classmethod
    def warn_duplicate_sectors(cls, v: Optional[List[Policy]]) -> Optional[List[Policy]]:
        """Same rule as the policy file: the last declaration per sector wins."""
        if v:
            sectors = [policy.sector_id for policy in v]
            duplicates = sorted({s for s in sectors if sectors.count(s) > 1})
            if duplicates:
                logger.warning(
                    "Duplicate sector policies, last declaration wins",
                    extra={"sectors": duplicates}
                )
        return v

    def domain_tickets(self) -> List[Ticket]:
        return [record.to_domain() for record in self.tickets]


class ReportRequest(ComplianceRequest):
    """Compliance report over a window and the equal-length window before it."""
    period: Optional[str] = Field(None, description="Preset period: 7days, 30days or 90days")
    period_days: Optional[int] = Field(None, ge=1, description="Custom period length in days")
    window_start: Optional[datetime] = Field(None, description="Explicit window start")
    window_end: Optional[datetime] = Field(None, description="Explicit window end (exclusive)")
    sector_id: Optional[str] = Field(None, description="Restrict to one sector")
    sector_label: Optional[str] = Field(None, description="Sector label for exports")

    @model_validator(mode="after")
    def validate_window_bounds(self) -> "ReportRequest":
        """Explicit windows need both bounds."""
        if (self.window_start is None) != (self.window_end is None):
            raise ValueError("window_start and window_end must be given together")
        return self


# ========== Response DTOs ==========

class DataQualityIssueDTO(BaseModel):
    ticket_id: str
    kind: str
    field: str
    detail: str


class TicketClassificationDTO(BaseModel):
    """SLA classification of one ticket."""
    ticket_id: str
    priority: str
    status: str
    deadline: Optional[datetime] = Field(None, description="Binding deadline")
    deadline_source: Optional[str] = Field(None, description="explicit or policy")
    policy_hours: float = Field(..., description="Resolved policy budget in hours")
    is_overdue: bool
    is_compliant: Optional[bool] = Field(None, description="Only set for resolved/closed tickets")
    remaining_seconds: Optional[float] = Field(None, description="Negative once past the deadline")
    countdown: Optional[str] = Field(None, description="Countdown label for active tickets")


class ComplianceCountersDTO(BaseModel):
    total: int
    by_status: Dict[str, int]
    overdue_count: int
    overdue_pct: float
    resolved_total: int
    compliant_count: int
    compliance_pct: float
    average_resolution_seconds: Optional[float] = None


class ComplianceSnapshotDTO(ComplianceCountersDTO):
    by_priority: Dict[str, ComplianceCountersDTO] = Field(default_factory=dict)
    by_sector: Dict[str, int] = Field(default_factory=dict)


class TrendIndicatorDTO(BaseModel):
    metric: str
    current: float
    previous: float
    delta: float
    delta_pct: float
    display_pct: float
    direction: str


class ResolutionTimeBucketDTO(BaseModel):
    average_seconds: float
    average_formatted: str
    count: int


class ResolutionTimeDTO(BaseModel):
    ticket_count: int
    average_seconds: float
    average_formatted: str
    median_seconds: Optional[float] = None
    median_formatted: str
    p90_seconds: Optional[float] = None
    p90_formatted: str
    by_priority: Dict[str, ResolutionTimeBucketDTO] = Field(default_factory=dict)
    by_tag: Dict[str, ResolutionTimeBucketDTO] = Field(default_factory=dict)


class WindowDTO(BaseModel):
    start: datetime
    end: datetime


class ClassificationResponse(BaseModel):
    classifications: List[TicketClassificationDTO]
    issues: List[DataQualityIssueDTO] = Field(default_factory=list)


class SnapshotResponse(BaseModel):
    snapshot: ComplianceSnapshotDTO
    issues: List[DataQualityIssueDTO] = Field(default_factory=list)


class ReportResponse(BaseModel):
    """Current vs previous window compliance with trends."""
    period_label: str
    sector_label: str
    window: WindowDTO
    previous_window: WindowDTO
    current: ComplianceSnapshotDTO
    previous: ComplianceSnapshotDTO
    trends: Dict[str, Optional[TrendIndicatorDTO]] = Field(
        ...,
        description="Per-metric trend; null when the previous value is zero"
    )
    resolution_times: ResolutionTimeDTO
    tag_volume: Dict[str, int] = Field(default_factory=dict)
    issues: List[DataQualityIssueDTO] = Field(default_factory=list)


class PoliciesResponse(BaseModel):
    policies: List[Policy]
    system_default: Dict[str, float]
