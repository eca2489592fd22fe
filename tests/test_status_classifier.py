"""Tests for StatusClassifier - compliance boundary, overdue rules and countdowns."""

from datetime import timedelta

from sla_engine.compliance.domain import StatusClassifier


class TestIsCompliant:
    def test_resolved_exactly_at_deadline_is_compliant(self, make_ticket):
        ticket = make_ticket(status="resolved", created_hours_ago=48, resolved_after=24)
        deadline = ticket.created_at + timedelta(hours=24)
        assert StatusClassifier.is_compliant(ticket, deadline) is True

    def test_resolved_one_microsecond_late_is_breached(self, make_ticket):
        ticket = make_ticket(status="closed", created_hours_ago=48, resolved_after=24)
        deadline = ticket.created_at + timedelta(hours=24) - timedelta(microseconds=1)
        assert StatusClassifier.is_compliant(ticket, deadline) is False

    def test_open_ticket_has_no_compliance(self, make_ticket, now):
        assert StatusClassifier.is_compliant(make_ticket(), now) is None
        assert StatusClassifier.is_compliant(make_ticket(status="in_progress"), now) is None

    def test_resolved_without_resolved_at_is_breached(self, make_ticket, now):
        ticket = make_ticket(status="resolved")
        assert StatusClassifier.is_compliant(ticket, now) is False

    def test_resolved_without_deadline_is_breached(self, make_ticket, now):
        ticket = make_ticket(status="resolved", created_at=None, resolved_at=now)
        assert StatusClassifier.is_compliant(ticket, None) is False


class TestIsOverdue:
    def test_open_past_deadline(self, make_ticket, now):
        ticket = make_ticket()
        assert StatusClassifier.is_overdue(ticket, now - timedelta(seconds=1), now) is True

    def test_open_at_deadline_not_overdue(self, make_ticket, now):
        assert StatusClassifier.is_overdue(make_ticket(), now, now) is False

    def test_resolved_on_time_never_overdue(self, make_ticket, now):
        ticket = make_ticket(status="resolved", created_hours_ago=100, resolved_after=1)
        deadline = ticket.created_at + timedelta(hours=24)
        # now is well past the deadline
        assert StatusClassifier.is_overdue(ticket, deadline, now) is False

    def test_resolved_late_is_overdue(self, make_ticket, now):
        ticket = make_ticket(status="resolved", created_hours_ago=100, resolved_after=30)
        deadline = ticket.created_at + timedelta(hours=24)
        assert StatusClassifier.is_overdue(ticket, deadline, now) is True

    def test_no_deadline_never_overdue(self, make_ticket, now):
        assert StatusClassifier.is_overdue(make_ticket(), None, now) is False


class TestClassify:
    def test_open_ticket_classification(self, make_ticket, resolver, now):
        ticket = make_ticket(created_hours_ago=20)
        result = StatusClassifier.classify(ticket, resolver, now)
        assert result.policy_hours == 24
        assert result.deadline_source == "policy"
        assert result.is_overdue is False
        assert result.is_compliant is None
        assert result.remaining_seconds == 4 * 3600
        assert result.countdown == "04:00:00"

    def test_overdue_ticket_countdown_expired(self, make_ticket, resolver, now):
        result = StatusClassifier.classify(make_ticket(created_hours_ago=30), resolver, now)
        assert result.is_overdue is True
        assert result.remaining_seconds < 0
        assert result.countdown == "00:00:00"

    def test_resolved_ticket_has_no_countdown(self, make_ticket, resolver, now):
        ticket = make_ticket(status="resolved", created_hours_ago=30, resolved_after=2)
        result = StatusClassifier.classify(ticket, resolver, now)
        assert result.is_compliant is True
        assert result.countdown is None

    def test_explicit_deadline_in_classification(self, make_ticket, resolver, now):
        ticket = make_ticket(explicit_deadline=now + timedelta(days=2, hours=3))
        result = StatusClassifier.classify(ticket, resolver, now)
        assert result.deadline_source == "explicit"
        assert result.countdown == "2d 03:00:00"

    def test_to_dict(self, make_ticket, resolver, now):
        data = StatusClassifier.classify(make_ticket(), resolver, now).to_dict()
        assert data["ticket_id"].startswith("T-")
        assert data["deadline"].endswith("+00:00")
        assert set(data) >= {"is_overdue", "is_compliant", "countdown", "policy_hours"}
