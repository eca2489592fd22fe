"""
Resolution Time Analysis
=========================

Time-to-resolution statistics measured from the first in-progress
transition to resolution, grouped by priority and by primary tag.

Only tickets with both timestamps and `resolved_at >= first_in_progress_at`
take part; missing or inverted intervals are excluded rather than counted
as zero. Tickets with a missing creation time, or resolved before they were
created, are excluded as well. Each ticket is attributed to its first tag only, so the per-tag
buckets add up to the overall sample count.
"""

import math
import statistics
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sla_engine.config import VALID_PRIORITIES
from sla_engine.compliance.domain.entities import Ticket
from sla_engine.compliance.domain.formatting import format_duration
from sla_engine.compliance.domain.value_objects import Window


def percentile(values: List[float], fraction: float) -> Optional[float]:
    """Linear-interpolated percentile (inclusive method) of unsorted values."""
    if not values:
        return None

    ordered = sorted(values)
    position = fraction * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[lower]
    weight = position - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * weight


@dataclass
class ResolutionTimeBucket:
    """Running sum/count of durations for one group."""

    seconds_total: float = 0.0
    count: int = 0

    def add(self, seconds: float) -> None:
        self.seconds_total += seconds
        self.count += 1

    @property
    def average_seconds(self) -> float:
        if self.count == 0:
            return 0.0
        return self.seconds_total / self.count

    @property
    def average_formatted(self) -> str:
        if self.count == 0:
            return format_duration(None)
        return format_duration(self.average_seconds)

    def to_dict(self) -> dict:
        return {
            "average_seconds": self.average_seconds,
            "average_formatted": self.average_formatted,
            "count": self.count,
        }


@dataclass
class ResolutionTimeReport:
    durations: List[float] = field(default_factory=list)
    by_priority: Dict[str, ResolutionTimeBucket] = field(default_factory=dict)
    by_tag: Dict[str, ResolutionTimeBucket] = field(default_factory=dict)

    @property
    def ticket_count(self) -> int:
        return len(self.durations)

    @property
    def average_seconds(self) -> float:
        if not self.durations:
            return 0.0
        return sum(self.durations) / len(self.durations)

    @property
    def median_seconds(self) -> Optional[float]:
        if not self.durations:
            return None
        return statistics.median(self.durations)

    @property
    def p90_seconds(self) -> Optional[float]:
        return percentile(self.durations, 0.9)

    @property
    def average_formatted(self) -> str:
        if not self.durations:
            return format_duration(None)
        return format_duration(self.average_seconds)

    def to_dict(self) -> dict:
        return {
            "ticket_count": self.ticket_count,
            "average_seconds": self.average_seconds,
            "average_formatted": self.average_formatted,
            "median_seconds": self.median_seconds,
            "median_formatted": format_duration(self.median_seconds),
            "p90_seconds": self.p90_seconds,
            "p90_formatted": format_duration(self.p90_seconds),
            "by_priority": {k: v.to_dict() for k, v in self.by_priority.items()},
            "by_tag": {k: v.to_dict() for k, v in self.by_tag.items()},
        }


class ResolutionTimeAnalyzer:
    """Builds a ResolutionTimeReport from tickets, optionally within a window."""

    @staticmethod
    def analyze(
        tickets: Iterable[Ticket],
        window: Optional[Window] = None
    ) -> ResolutionTimeReport:
        report = ResolutionTimeReport()
        by_priority: Dict[str, ResolutionTimeBucket] = {}
        by_tag: Dict[str, ResolutionTimeBucket] = {}

        for ticket in tickets:
            if ticket.created_at is None or ticket.lead_time_seconds is None:
                continue
            seconds = ticket.work_time_seconds
            if seconds is None:
                continue
            if window is not None and not window.contains(ticket.resolved_at):
                continue

            report.durations.append(seconds)
            by_priority.setdefault(ticket.priority, ResolutionTimeBucket()).add(seconds)
            by_tag.setdefault(ticket.primary_tag, ResolutionTimeBucket()).add(seconds)

        known = [p for p in VALID_PRIORITIES if p in by_priority]
        unknown = sorted(p for p in by_priority if p not in VALID_PRIORITIES)
        report.by_priority = {p: by_priority[p] for p in known + unknown}
        report.by_tag = dict(
            sorted(by_tag.items(), key=lambda item: (-item[1].count, item[0]))
        )
        return report
