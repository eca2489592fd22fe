"""
Period-over-period trend indicators between two compliance snapshots.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from sla_engine.config import TrendDirection
from sla_engine.compliance.domain.aggregation import ComplianceSnapshot

TREND_METRICS = ("total", "resolved_total", "overdue_count", "compliance_pct")


@dataclass(frozen=True)
class TrendIndicator:
    """Delta of one metric between the current and the previous window."""

    metric: str
    current: float
    previous: float
    delta: float
    delta_pct: float
    direction: str

    @property
    def display_pct(self) -> float:
        """Signed percentage rounded for badges; never feed back into math."""
        return round(self.delta_pct, 1)

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "current": self.current,
            "previous": self.previous,
            "delta": self.delta,
            "delta_pct": self.delta_pct,
            "display_pct": self.display_pct,
            "direction": self.direction,
        }


class TrendEngine:
    """
    Computes deltas for each metric of interest.

    A metric whose previous value is zero has no trend (None): the
    percentage change is undefined and no badge is shown.
    """

    @staticmethod
    def compare(metric: str, current: float, previous: float) -> Optional[TrendIndicator]:
        if previous == 0:
            return None

        delta = current - previous
        if delta == 0:
            direction = TrendDirection.FLAT
        elif delta > 0:
            direction = TrendDirection.UP
        else:
            direction = TrendDirection.DOWN

        return TrendIndicator(
            metric=metric,
            current=current,
            previous=previous,
            delta=delta,
            delta_pct=100.0 * delta / previous,
            direction=direction,
        )

    @classmethod
    def trend(
        cls,
        current: ComplianceSnapshot,
        previous: ComplianceSnapshot
    ) -> Dict[str, Optional[TrendIndicator]]:
        return {
            metric: cls.compare(metric, getattr(current, metric), getattr(previous, metric))
            for metric in TREND_METRICS
        }
