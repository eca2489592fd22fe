"""
Compliance Application Services
================================

Application services orchestrate the pure engine and coordinate with the
policy source.

Following SOLID principles:
- Single Responsibility: the domain computes, the service selects and reports
- Dependency Inversion: depend on a policy provider abstraction, not on files
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sla_engine.config import (
    ALL_SECTORS_LABEL, CUSTOM_PERIOD_LABEL, PERIOD_PRESETS,
)
from sla_engine.core import ValidationException
from sla_engine.compliance.application.dto import ensure_utc
from sla_engine.compliance.domain import (
    ComplianceAggregator,
    ComplianceSnapshot,
    DataQualityIssue,
    Policy,
    PolicyResolver,
    ResolutionTimeAnalyzer,
    ResolutionTimeReport,
    StatusClassifier,
    Ticket,
    TicketClassification,
    TrendEngine,
    TrendIndicator,
    Window,
    count_tag_volume,
    inspect_tickets,
)
from sla_engine.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


# ========== Provider Interfaces (Dependency Inversion) ==========

class IPolicyProvider(ABC):
    """Interface for sector policy access."""

    @abstractmethod
    def get_policies(self) -> List[Policy]:
        """Get the current sector policies."""


class StaticPolicyProvider(IPolicyProvider):
    """Policy provider over a fixed in-memory list."""

    def __init__(self, policies: Iterable[Policy] = ()):
        self._policies = list(policies)

    def get_policies(self) -> List[Policy]:
        return list(self._policies)


# ========== Results ==========

@dataclass
class ComplianceReport:
    """Everything a dashboard or export needs for one reporting period."""

    period_label: str
    sector_label: str
    window: Window
    previous_window: Window
    current: ComplianceSnapshot
    previous: ComplianceSnapshot
    trends: Dict[str, Optional[TrendIndicator]]
    resolution_times: ResolutionTimeReport
    tag_volume: Dict[str, int] = field(default_factory=dict)
    issues: List[DataQualityIssue] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period_label": self.period_label,
            "sector_label": self.sector_label,
            "window": self.window.to_dict(),
            "previous_window": self.previous_window.to_dict(),
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict(),
            "trends": {
                metric: indicator.to_dict() if indicator else None
                for metric, indicator in self.trends.items()
            },
            "resolution_times": self.resolution_times.to_dict(),
            "tag_volume": dict(self.tag_volume),
            "issues": [issue.to_dict() for issue in self.issues],
        }


# ========== Application Services ==========

def resolve_window(
    now: datetime,
    period: Optional[str] = None,
    period_days: Optional[int] = None,
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
    default_days: int = 30
) -> Tuple[Window, str]:
    """
    Pick the reporting window and its label.

    Precedence: explicit bounds, then a preset period, then a custom number
    of days, then `default_days`. Window ends are exclusive.

    Raises:
        ValidationException: unknown preset, non-positive days or an
            inverted explicit window
    """
    if window_start is not None and window_end is not None:
        return Window(ensure_utc(window_start), ensure_utc(window_end)), CUSTOM_PERIOD_LABEL

    if period is not None:
        if period not in PERIOD_PRESETS:
            raise ValidationException(
                f"Unknown period '{period}'",
                {"allowed": sorted(PERIOD_PRESETS)}
            )
        return Window.last_days(now, PERIOD_PRESETS[period]), period

    days = period_days if period_days is not None else default_days
    if days < 1:
        raise ValidationException("period_days must be at least 1", {"period_days": days})

    label = next(
        (key for key, value in PERIOD_PRESETS.items() if value == days),
        CUSTOM_PERIOD_LABEL
    )
    return Window.last_days(now, days), label


class ComplianceReportService:
    """
    Runs the compliance engine for a caller.

    Stateless apart from the policy provider; every call gets its reference
    instant injected.
    """

    def __init__(
        self,
        policy_provider: IPolicyProvider,
        reporting_floor: Optional[datetime] = None
    ):
        self._policy_provider = policy_provider
        self._reporting_floor = ensure_utc(reporting_floor)

    def _resolver(self) -> PolicyResolver:
        return PolicyResolver(self._policy_provider.get_policies())

    def _report_issues(self, issues: Sequence[DataQualityIssue]) -> None:
        """Surface structurally invalid input as warnings."""
        for issue in issues:
            logger.warning(
                "Ticket data-quality issue",
                extra=issue.to_dict()
            )
        if issues:
            logger.warning(
                "Tickets with data-quality issues excluded from affected aggregates",
                extra={
                    "issue_count": len(issues),
                    "by_kind": dict(Counter(issue.kind for issue in issues)),
                }
            )

    def inspect(self, tickets: Sequence[Ticket]) -> List[DataQualityIssue]:
        """Find structurally invalid tickets and log them as warnings."""
        issues = inspect_tickets(tickets)
        self._report_issues(issues)
        return issues

    def classify(self, tickets: Sequence[Ticket], now: datetime) -> List[TicketClassification]:
        """Classify each ticket against its deadline at `now`."""
        resolver = self._resolver()
        return [StatusClassifier.classify(ticket, resolver, now) for ticket in tickets]

    def snapshot(
        self,
        tickets: Sequence[Ticket],
        now: datetime
    ) -> Tuple[ComplianceSnapshot, List[DataQualityIssue]]:
        """Aggregate the given tickets as-is, without window selection."""
        issues = self.inspect(tickets)
        return ComplianceAggregator.aggregate(tickets, self._resolver(), now), issues

    def _select(self, tickets: Iterable[Ticket], window: Window) -> List[Ticket]:
        return [ticket for ticket in tickets if window.contains(ticket.created_at)]

    def build_report(
        self,
        tickets: Sequence[Ticket],
        now: datetime,
        window: Window,
        period_label: str = CUSTOM_PERIOD_LABEL,
        sector_id: Optional[str] = None,
        sector_label: Optional[str] = None
    ) -> ComplianceReport:
        """
        Build a period report.

        Tickets are selected into the current and previous windows by
        creation time; tickets without a valid creation time cannot be
        windowed and only appear in the returned issues. Resolution times
        are selected by resolution time within the current window.
        """
        if sector_id:
            tickets = [t for t in tickets if t.sector_id == sector_id]

        issues = self.inspect(tickets)

        eligible = list(tickets)
        if self._reporting_floor is not None:
            eligible = [
                t for t in eligible
                if t.created_at is not None and t.created_at >= self._reporting_floor
            ]

        previous_window = window.previous()
        current_tickets = self._select(eligible, window)
        previous_tickets = self._select(eligible, previous_window)
        resolver = self._resolver()

        with log_latency(
            logger,
            "compliance_report",
            tickets=len(eligible),
            current_tickets=len(current_tickets),
            previous_tickets=len(previous_tickets),
        ):
            current = ComplianceAggregator.aggregate(current_tickets, resolver, now)
            previous = ComplianceAggregator.aggregate(previous_tickets, resolver, now)
            trends = TrendEngine.trend(current, previous)
            resolution_times = ResolutionTimeAnalyzer.analyze(eligible, window)

        return ComplianceReport(
            period_label=period_label,
            sector_label=sector_label or sector_id or ALL_SECTORS_LABEL,
            window=window,
            previous_window=previous_window,
            current=current,
            previous=previous,
            trends=trends,
            resolution_times=resolution_times,
            tag_volume=count_tag_volume(current_tickets),
            issues=issues,
        )
