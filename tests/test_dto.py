"""Tests for request DTOs and timestamp parsing."""

import logging
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from sla_engine.compliance.application import (
    ComplianceRequest,
    ReportRequest,
    TicketRecordDTO,
    ensure_utc,
    parse_instant,
)


class TestParseInstant:
    def test_iso_string_with_offset(self):
        instant, usable = parse_instant("2024-01-15T10:00:00+02:00")
        assert usable is True
        assert instant == datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)

    def test_naive_treated_as_utc(self):
        instant, usable = parse_instant("2024-01-15T10:00:00")
        assert usable is True
        assert instant.tzinfo is not None
        assert instant == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def test_absent_is_usable(self):
        assert parse_instant(None) == (None, True)
        assert parse_instant("") == (None, True)

    def test_garbage_is_not_usable(self):
        assert parse_instant("yesterday-ish") == (None, False)

    def test_ensure_utc_keeps_aware(self):
        aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert ensure_utc(aware) is aware
        assert ensure_utc(None) is None


class TestTicketRecordDTO:
    def test_to_domain(self):
        ticket = TicketRecordDTO(
            id="T-1",
            priority="P1",
            status="resolved",
            sector_id="billing",
            created_at="2024-01-15T10:00:00Z",
            first_in_progress_at="2024-01-15T11:00:00Z",
            resolved_at="2024-01-15T15:00:00Z",
            tags=["billing", "urgent"],
        ).to_domain()

        assert ticket.tags == ("billing", "urgent")
        assert ticket.work_time_seconds == 4 * 3600
        assert ticket.invalid_fields == frozenset()

    def test_bad_timestamp_recorded_not_rejected(self):
        ticket = TicketRecordDTO(id="T-2", priority="P2", created_at="not a date").to_domain()
        assert ticket.created_at is None
        assert ticket.invalid_fields == frozenset({"created_at"})
        assert ticket.status == "open"

    def test_blank_sector_becomes_none(self):
        ticket = TicketRecordDTO(id="T-3", priority="P2", sector_id="", team="").to_domain()
        assert ticket.sector_id is None
        assert ticket.sector_key == "unassigned"


class TestComplianceRequest:
    def test_duplicate_policies_warned(self, caplog):
        with caplog.at_level(logging.WARNING):
            request = ComplianceRequest(tickets=[], policies=[
                {"sector_id": "S", "p1_hours": 10},
                {"sector_id": "S", "p1_hours": 20},
            ])
        assert "Duplicate sector policies" in caplog.text
        assert len(request.policies) == 2

    def test_distinct_policies_not_warned(self, caplog):
        with caplog.at_level(logging.WARNING):
            ComplianceRequest(tickets=[], policies=[{"sector_id": "S"}, {"sector_id": "X"}])
        assert "Duplicate sector policies" not in caplog.text


class TestReportRequest:
    def test_window_bounds_required_together(self):
        with pytest.raises(ValidationError):
            ReportRequest(tickets=[], window_start=datetime(2024, 1, 1))

    def test_period_days_positive(self):
        with pytest.raises(ValidationError):
            ReportRequest(tickets=[], period_days=0)
