"""
Data-quality inspection of ticket input.

Structurally invalid tickets are not rejected: the engine excludes them from
whichever aggregate they would corrupt and reports them here so the caller
can log them as warnings.
"""

from typing import Iterable, List

from sla_engine.config import CLOSED_STATUSES, DataQualityIssueKind, VALID_PRIORITIES, VALID_STATUSES
from sla_engine.compliance.domain.entities import DataQualityIssue, Ticket


def inspect_ticket(ticket: Ticket) -> List[DataQualityIssue]:
    issues: List[DataQualityIssue] = []

    def report(kind: str, field: str, detail: str) -> None:
        issues.append(DataQualityIssue(ticket_id=ticket.id, kind=kind, field=field, detail=detail))

    for field_name in sorted(ticket.invalid_fields):
        if field_name != "created_at":
            report(DataQualityIssueKind.MALFORMED_TIMESTAMP, field_name, "unparseable timestamp")

    if ticket.created_at is None:
        detail = "unparseable timestamp" if "created_at" in ticket.invalid_fields else "missing"
        report(DataQualityIssueKind.MALFORMED_TIMESTAMP, "created_at", detail)
    elif ticket.resolved_at is not None and ticket.resolved_at < ticket.created_at:
        report(
            DataQualityIssueKind.MALFORMED_TIMESTAMP,
            "resolved_at",
            "resolved before creation"
        )

    if ticket.priority not in VALID_PRIORITIES:
        report(
            DataQualityIssueKind.UNKNOWN_PRIORITY,
            "priority",
            f"'{ticket.priority}' looked up as P3"
        )

    if ticket.status not in VALID_STATUSES:
        report(DataQualityIssueKind.UNKNOWN_STATUS, "status", f"'{ticket.status}'")

    if ticket.status in CLOSED_STATUSES and ticket.resolved_at is None:
        report(
            DataQualityIssueKind.MISSING_RESOLVED_AT,
            "resolved_at",
            f"status '{ticket.status}' without resolution time"
        )

    if (
        ticket.first_in_progress_at is not None
        and ticket.resolved_at is not None
        and ticket.resolved_at < ticket.first_in_progress_at
    ):
        report(
            DataQualityIssueKind.INVERTED_RESOLUTION_INTERVAL,
            "first_in_progress_at",
            "resolved before work started"
        )

    return issues


def inspect_tickets(tickets: Iterable[Ticket]) -> List[DataQualityIssue]:
    issues: List[DataQualityIssue] = []
    for ticket in tickets:
        issues.extend(inspect_ticket(ticket))
    return issues
