"""
Compliance Domain Layer
=======================

Pure SLA deadline and compliance engine.

Contains:
- Entities: Ticket, TicketClassification, DataQualityIssue
- Value Objects: Policy, PolicyConfig, Window
- Domain Services: PolicyResolver, DeadlineCalculator, StatusClassifier,
  ComplianceAggregator, TrendEngine, ResolutionTimeAnalyzer

This layer has no dependencies on infrastructure and reads no clock: the
reference instant is always passed in.
"""

from sla_engine.compliance.domain.entities import (
    Ticket,
    TicketClassification,
    DataQualityIssue,
)
from sla_engine.compliance.domain.value_objects import (
    Policy,
    PolicyConfig,
    PolicyResolver,
    DeadlineCalculator,
    StatusClassifier,
    Window,
)
from sla_engine.compliance.domain.aggregation import (
    ComplianceAggregator,
    ComplianceCounters,
    ComplianceSnapshot,
    count_tag_volume,
    merge_snapshots,
)
from sla_engine.compliance.domain.trends import TrendEngine, TrendIndicator, TREND_METRICS
from sla_engine.compliance.domain.resolution_times import (
    ResolutionTimeAnalyzer,
    ResolutionTimeBucket,
    ResolutionTimeReport,
)
from sla_engine.compliance.domain.formatting import format_countdown, format_duration
from sla_engine.compliance.domain.quality import inspect_ticket, inspect_tickets

__all__ = [
    # Entities
    "Ticket",
    "TicketClassification",
    "DataQualityIssue",
    # Value Objects
    "Policy",
    "PolicyConfig",
    "Window",
    # Domain Services
    "PolicyResolver",
    "DeadlineCalculator",
    "StatusClassifier",
    "ComplianceAggregator",
    "ComplianceCounters",
    "ComplianceSnapshot",
    "merge_snapshots",
    "count_tag_volume",
    "TrendEngine",
    "TrendIndicator",
    "TREND_METRICS",
    "ResolutionTimeAnalyzer",
    "ResolutionTimeBucket",
    "ResolutionTimeReport",
    # Helpers
    "format_duration",
    "format_countdown",
    "inspect_ticket",
    "inspect_tickets",
]
