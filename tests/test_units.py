"""Tests for byte, duration and value formatting."""
from __future__ import annotations

import pytest

from weni.units import format_bytes, format_celsius, format_duration, format_mhz, format_percent


class TestFormatBytes:
    """Tests for the four-tier 1024-based byte scale."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1024, "1.00 KB"),
            (1536, "1.50 KB"),
            (1024 * 1024 * 3, "3.00 MB"),
            (1024**3, "1.00 GB"),
        ],
    )
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    def test_terabytes_stay_in_gigabytes(self):
        """There is no TB tier; large values are expressed in GB."""
        assert format_bytes(2 * 1024**4) == "2048.00 GB"


class TestFormatDuration:
    """Tests for hour/minute durations."""

    def test_hours_and_minutes(self):
        assert format_duration(5400) == "1h 30m"

    def test_seconds_are_truncated(self):
        assert format_duration(3659) == "1h 0m"

    def test_zero(self):
        assert format_duration(0) == "0h 0m"

    def test_negative_clamped(self):
        assert format_duration(-30) == "0h 0m"


def test_format_percent():
    assert format_percent(12.345) == "12.35%"


def test_format_celsius():
    assert format_celsius(45.25) == "45.2°C"


def test_format_mhz():
    assert format_mhz(2400) == "2400 MHz"
