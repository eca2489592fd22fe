"""Tests for DeadlineCalculator."""

from datetime import timedelta

from sla_engine.config import DeadlineSource
from sla_engine.compliance.domain import DeadlineCalculator


class TestDeadlineCalculator:
    def test_policy_deadline(self, make_ticket):
        ticket = make_ticket(created_hours_ago=10)
        deadline = DeadlineCalculator.compute_deadline(ticket, 24)
        assert deadline == ticket.created_at + timedelta(hours=24)
        assert DeadlineCalculator.deadline_source(ticket) == DeadlineSource.POLICY

    def test_explicit_deadline_overrides_policy(self, make_ticket, now):
        explicit = now + timedelta(minutes=5)
        ticket = make_ticket(explicit_deadline=explicit)
        assert DeadlineCalculator.compute_deadline(ticket, 24) == explicit
        assert DeadlineCalculator.deadline_source(ticket) == DeadlineSource.EXPLICIT

    def test_explicit_deadline_without_created_at(self, make_ticket, now):
        ticket = make_ticket(created_at=None, explicit_deadline=now)
        assert DeadlineCalculator.compute_deadline(ticket, 24) == now

    def test_no_created_at_no_deadline(self, make_ticket):
        ticket = make_ticket(created_at=None)
        assert DeadlineCalculator.compute_deadline(ticket, 24) is None
        assert DeadlineCalculator.deadline_source(ticket) is None

    def test_fractional_hours(self, make_ticket):
        ticket = make_ticket()
        deadline = DeadlineCalculator.compute_deadline(ticket, 1.5)
        assert deadline - ticket.created_at == timedelta(minutes=90)
