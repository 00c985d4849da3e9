"""Tests for showtime parsing and clock formatting."""

from datetime import date, datetime

import pytest

from mseater.utils import format_clock, parse_showtime

SHOW_DATE = date(2026, 10, 18)


class TestParseShowtime:
    @pytest.mark.parametrize(
        ("text", "hour", "minute"),
        [
            ("9:30a", 9, 30),
            ("\n   12:30p   \n", 12, 30),
            ("12:05a", 0, 5),
            ("7:15p", 19, 15),
            ("11:59pm", 23, 59),
        ],
    )
    def test_parses_button_text(self, text: str, hour: int, minute: int) -> None:
        assert parse_showtime(text, SHOW_DATE) == datetime(2026, 10, 18, hour, minute)

    @pytest.mark.parametrize("text", ["", "soon", "25:00p", "7:15"])
    def test_rejects_non_times(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_showtime(text, SHOW_DATE)


class TestFormatClock:
    @pytest.mark.parametrize(
        ("hour", "minute", "expected"),
        [(0, 5, "12:05am"), (9, 30, "9:30am"), (12, 0, "12:00pm"), (15, 4, "3:04pm")],
    )
    def test_formats(self, hour: int, minute: int, expected: str) -> None:
        assert format_clock(datetime(2026, 10, 18, hour, minute)) == expected
