"""Tests for duration and countdown labels."""

import pytest

from sla_engine.compliance.domain import format_countdown, format_duration


class TestFormatDuration:
    @pytest.mark.parametrize("seconds, expected", [
        (0, "0m"),
        (45 * 60, "45m"),
        (4 * 3600, "4h"),
        (4 * 3600 + 30 * 60, "4h 30m"),
        (3 * 86400, "3d"),
        (3 * 86400 + 2 * 3600, "3d 2h"),
    ])
    def test_labels(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_none_is_placeholder(self):
        assert format_duration(None) == "—"

    def test_minutes_round_half_up(self):
        assert format_duration(90) == "2m"
        assert format_duration(89) == "1m"

    @pytest.mark.parametrize("seconds, expected", [
        (4 * 3600 + 59.7 * 60, "5h"),
        (3 * 86400 + 23.6 * 3600, "4d"),
        (3599.9, "1h"),
        (86399, "1d"),
    ])
    def test_rounding_rolls_over_to_next_unit(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_negative_clamped(self):
        assert format_duration(-30) == "0m"


class TestFormatCountdown:
    def test_under_a_day(self):
        assert format_countdown(3661) == "01:01:01"

    def test_over_a_day(self):
        assert format_countdown(86400 + 3661) == "1d 01:01:01"

    def test_expired(self):
        assert format_countdown(0) == "00:00:00"
        assert format_countdown(-120) == "00:00:00"
