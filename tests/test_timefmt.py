"""Tests for time formatting and strict timestamp parsing."""

import pytest

from livenotes.errors import ValidationError
from livenotes.timefmt import format_absolute, format_duration_ms, format_relative, parse_absolute


class TestParseAbsolute:
    def test_round_trip(self):
        ms = parse_absolute("2024-05-01 09:30:12")
        assert format_absolute(ms) == "2024-05-01 09:30:12"

    @pytest.mark.parametrize(
        "text",
        ["2024-13-40 99:99:99", "2024-05-01", "2024-05-01T09:30:12", "24-05-01 09:30:12", "", "now"],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(ValidationError):
            parse_absolute(text)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_absolute("nope")


class TestDurations:
    def test_relative(self):
        assert format_relative(3_723_000) == "01:02:03"
        assert format_relative(-5000) == "00:00:00"

    def test_duration_with_ms(self):
        assert format_duration_ms(3_723_045) == "01:02:03.0450000"
