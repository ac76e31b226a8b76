"""
Tests for time helpers.

Tests cover:
1. Display formatting (H:MM:SS)
2. File name formatting (H-MM-SS)
3. Parsing of user supplied times
"""

import pytest

from tagging_rugby.utils import format_time, format_timestamp, parse_time_to_seconds


class TestFormatTime:
    """Tests for format_time."""

    def test_zero(self):
        assert format_time(0) == "0:00:00"

    def test_minutes_and_seconds(self):
        assert format_time(90.7) == "0:01:30"

    def test_hours(self):
        assert format_time(3 * 3600 + 5 * 60 + 9) == "3:05:09"

    def test_negative_clamps_to_zero(self):
        assert format_time(-12) == "0:00:00"


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_uses_dashes(self):
        assert format_timestamp(3723) == "1-02-03"

    def test_no_colons(self):
        assert ":" not in format_timestamp(500)


class TestParseTimeToSeconds:
    """Tests for parse_time_to_seconds."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("90", 90.0),
            ("12.5", 12.5),
            ("1:30", 90.0),
            ("1:11:22", 4282.0),
            (" 0:05 ", 5.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_time_to_seconds(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "1:2:3:4", "-5", "1:xx", "nan", "inf", "1:nan"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_time_to_seconds(value)
