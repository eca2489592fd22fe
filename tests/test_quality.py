"""Tests for data-quality inspection."""

from sla_engine.config import DataQualityIssueKind
from sla_engine.compliance.domain import inspect_ticket, inspect_tickets


def kinds(issues):
    return [(issue.kind, issue.field) for issue in issues]


class TestInspectTicket:
    def test_clean_ticket(self, make_ticket):
        ticket = make_ticket(status="resolved", created_hours_ago=5, in_progress_after=1, resolved_after=2)
        assert inspect_ticket(ticket) == []

    def test_missing_created_at(self, make_ticket):
        issues = inspect_ticket(make_ticket(created_at=None))
        assert kinds(issues) == [(DataQualityIssueKind.MALFORMED_TIMESTAMP, "created_at")]
        assert issues[0].detail == "missing"

    def test_unparseable_timestamps(self, make_ticket):
        ticket = make_ticket(created_at=None, invalid_fields=frozenset({"created_at", "resolved_at"}))
        issues = inspect_ticket(ticket)
        assert (DataQualityIssueKind.MALFORMED_TIMESTAMP, "resolved_at") in kinds(issues)
        assert (DataQualityIssueKind.MALFORMED_TIMESTAMP, "created_at") in kinds(issues)

    def test_resolved_before_created(self, make_ticket):
        ticket = make_ticket(status="resolved", created_hours_ago=5, resolved_after=-1)
        assert (DataQualityIssueKind.MALFORMED_TIMESTAMP, "resolved_at") in kinds(inspect_ticket(ticket))

    def test_unknown_priority_and_status(self, make_ticket):
        issues = inspect_ticket(make_ticket(priority="urgent", status="pending"))
        assert kinds(issues) == [
            (DataQualityIssueKind.UNKNOWN_PRIORITY, "priority"),
            (DataQualityIssueKind.UNKNOWN_STATUS, "status"),
        ]
        assert "P3" in issues[0].detail

    def test_closed_without_resolved_at(self, make_ticket):
        issues = inspect_ticket(make_ticket(status="closed"))
        assert kinds(issues) == [(DataQualityIssueKind.MISSING_RESOLVED_AT, "resolved_at")]

    def test_inverted_work_interval(self, make_ticket):
        ticket = make_ticket(status="resolved", created_hours_ago=10, in_progress_after=5, resolved_after=2)
        assert kinds(inspect_ticket(ticket)) == [
            (DataQualityIssueKind.INVERTED_RESOLUTION_INTERVAL, "first_in_progress_at")
        ]

    def test_inspect_tickets_flattens(self, make_ticket):
        tickets = [make_ticket(), make_ticket(status="closed"), make_ticket(priority="x")]
        assert len(inspect_tickets(tickets)) == 2
