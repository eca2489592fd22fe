"""Shared fixtures for compliance engine tests."""

from datetime import datetime, timedelta, timezone

import pytest

from sla_engine.compliance.domain import Policy, PolicyResolver, Ticket

NOW = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_ticket():
    """Build a Ticket with sensible defaults; timestamps are offsets in hours from NOW."""
    counter = {"n": 0}

    def _make(
        priority="P1",
        status="open",
        sector_id="S",
        created_hours_ago=1.0,
        in_progress_after=None,
        resolved_after=None,
        **overrides
    ):
        counter["n"] += 1
        created_at = NOW - timedelta(hours=created_hours_ago)
        fields = dict(
            id=f"T-{counter['n']}",
            priority=priority,
            status=status,
            sector_id=sector_id,
            created_at=created_at,
            first_in_progress_at=(
                created_at + timedelta(hours=in_progress_after)
                if in_progress_after is not None else None
            ),
            resolved_at=(
                created_at + timedelta(hours=resolved_after)
                if resolved_after is not None else None
            ),
        )
        fields.update(overrides)
        return Ticket(**fields)

    return _make


@pytest.fixture
def sector_policy():
    return Policy(sector_id="S", sector_name="Support", p0_hours=4, p1_hours=24, p2_hours=72, p3_hours=168)


@pytest.fixture
def resolver(sector_policy):
    return PolicyResolver([sector_policy])
