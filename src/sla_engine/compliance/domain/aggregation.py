"""
Compliance Aggregation
=======================

Folds classified tickets into counters and a compliance percentage, with
breakdowns by priority and by sector/team.

Every counter is a plain sum, so snapshots of disjoint ticket partitions can
be merged by adding counters; percentages and averages are always derived
from merged numerators and denominators, never averaged.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sla_engine.config import (
    ACTIVE_STATUSES, CLOSED_STATUSES, TicketStatus, VALID_PRIORITIES, VALID_STATUSES,
)
from sla_engine.compliance.domain.entities import Ticket, TicketClassification
from sla_engine.compliance.domain.value_objects import PolicyResolver, StatusClassifier


def _empty_status_counts() -> Dict[str, int]:
    return {status: 0 for status in VALID_STATUSES}


def _percentage(numerator: int, denominator: int) -> float:
    # Zero denominator is defined as 0%, never NaN
    if denominator <= 0:
        return 0.0
    return 100.0 * numerator / denominator


@dataclass
class ComplianceCounters:
    """
    Additive counters for a population of tickets.

    `by_status` always holds the four known statuses; unknown raw statuses
    get their own keys so that bad data stays visible.
    """

    total: int = 0
    by_status: Dict[str, int] = field(default_factory=_empty_status_counts)
    overdue_count: int = 0
    compliant_count: int = 0
    lead_time_seconds_total: float = 0.0
    lead_time_samples: int = 0

    @property
    def resolved_total(self) -> int:
        return self.by_status[TicketStatus.RESOLVED] + self.by_status[TicketStatus.CLOSED]

    @property
    def compliance_pct(self) -> float:
        return _percentage(self.compliant_count, self.resolved_total)

    @property
    def overdue_pct(self) -> float:
        return _percentage(self.overdue_count, self.total)

    @property
    def average_resolution_seconds(self) -> Optional[float]:
        """Mean creation-to-resolution time of finished tickets."""
        if self.lead_time_samples == 0:
            return None
        return self.lead_time_seconds_total / self.lead_time_samples

    def add(self, ticket: Ticket, classification: TicketClassification) -> None:
        """Count one classified ticket into exactly one status bucket."""
        self.total += 1
        self.by_status[ticket.status] = self.by_status.get(ticket.status, 0) + 1

        if ticket.status in ACTIVE_STATUSES and classification.is_overdue:
            self.overdue_count += 1

        if ticket.status in CLOSED_STATUSES:
            if classification.is_compliant:
                self.compliant_count += 1
            lead_time = ticket.lead_time_seconds
            if lead_time is not None:
                self.lead_time_seconds_total += lead_time
                self.lead_time_samples += 1

    def _merge_counters_into(self, target: "ComplianceCounters") -> None:
        target.total += self.total
        for status, count in self.by_status.items():
            target.by_status[status] = target.by_status.get(status, 0) + count
        target.overdue_count += self.overdue_count
        target.compliant_count += self.compliant_count
        target.lead_time_seconds_total += self.lead_time_seconds_total
        target.lead_time_samples += self.lead_time_samples

    def merged(self, other: "ComplianceCounters") -> "ComplianceCounters":
        result = ComplianceCounters()
        self._merge_counters_into(result)
        other._merge_counters_into(result)
        return result

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "overdue_count": self.overdue_count,
            "overdue_pct": self.overdue_pct,
            "resolved_total": self.resolved_total,
            "compliant_count": self.compliant_count,
            "compliance_pct": self.compliance_pct,
            "average_resolution_seconds": self.average_resolution_seconds,
        }


@dataclass
class ComplianceSnapshot(ComplianceCounters):
    """
    Aggregate compliance for a ticket population.

    Per-priority breakdowns repeat the full counters; per-sector breakdowns
    carry ticket counts only.
    """

    by_priority: Dict[str, ComplianceCounters] = field(default_factory=dict)
    by_sector: Dict[str, int] = field(default_factory=dict)

    def merge(self, other: "ComplianceSnapshot") -> "ComplianceSnapshot":
        """Combine snapshots of disjoint ticket partitions."""
        result = ComplianceSnapshot()
        for part in (self, other):
            part._merge_counters_into(result)
            for priority, counters in part.by_priority.items():
                result.by_priority[priority] = result.by_priority.get(
                    priority, ComplianceCounters()
                ).merged(counters)
            for sector, count in part.by_sector.items():
                result.by_sector[sector] = result.by_sector.get(sector, 0) + count
        return result

    def ordered_priorities(self) -> List[str]:
        """Known priorities first (P0..P3), then unknown ones alphabetically."""
        known = [p for p in VALID_PRIORITIES if p in self.by_priority]
        unknown = sorted(p for p in self.by_priority if p not in VALID_PRIORITIES)
        return known + unknown

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["by_priority"] = {
            priority: self.by_priority[priority].to_dict()
            for priority in self.ordered_priorities()
        }
        data["by_sector"] = dict(sorted(self.by_sector.items()))
        return data


def merge_snapshots(snapshots: Iterable[ComplianceSnapshot]) -> ComplianceSnapshot:
    """Fold any number of partial snapshots into one."""
    result = ComplianceSnapshot()
    for snapshot in snapshots:
        result = result.merge(snapshot)
    return result


class ComplianceAggregator:
    """
    Classifies every ticket and folds the results into a ComplianceSnapshot.

    Stateless; `now` is injected so the output is deterministic.
    """

    @staticmethod
    def classify_all(
        tickets: Sequence[Ticket],
        resolver: PolicyResolver,
        now: datetime
    ) -> List[Tuple[Ticket, TicketClassification]]:
        return [(ticket, StatusClassifier.classify(ticket, resolver, now)) for ticket in tickets]

    @classmethod
    def aggregate(
        cls,
        tickets: Sequence[Ticket],
        resolver: PolicyResolver,
        now: datetime
    ) -> ComplianceSnapshot:
        snapshot = ComplianceSnapshot()

        for ticket, classification in cls.classify_all(tickets, resolver, now):
            snapshot.add(ticket, classification)

            bucket = snapshot.by_priority.setdefault(ticket.priority, ComplianceCounters())
            bucket.add(ticket, classification)

            sector = ticket.sector_key
            snapshot.by_sector[sector] = snapshot.by_sector.get(sector, 0) + 1

        return snapshot


def count_tag_volume(tickets: Iterable[Ticket]) -> Dict[str, int]:
    """
    Ticket volume per tag, counting a ticket once for every tag it carries.

    Unlike resolution-time attribution, tags fan out here.
    """
    volume: Counter = Counter()
    for ticket in tickets:
        volume.update(list(dict.fromkeys(ticket.tags)))
    return dict(volume.most_common())
