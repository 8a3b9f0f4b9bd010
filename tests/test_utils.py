"""Tests for interval parsing, duration rendering and log filtering."""
from datetime import timedelta

import pytest

from codewars_bot.utils import (
    format_duration, interval_to_timedelta, log_message, parse_interval, set_log_level,
)


@pytest.mark.parametrize("text,expected", [
    ("10s", (10, "s")),
    ("5min", (5, "m")),
    ("5 minutes", (5, "m")),
    ("2h", (2, "h")),
    ("3 Days", (3, "d")),
    ("1week", (1, "w")),
    (" 30sec ", (30, "s")),
])
def test_parse_interval(text, expected):
    assert parse_interval(text) == expected


@pytest.mark.parametrize("text", ["", "ten seconds", "5", "5y", "-5m"])
def test_parse_interval_rejects(text):
    assert parse_interval(text) == (None, None)


def test_interval_to_timedelta():
    assert interval_to_timedelta(5, "m") == timedelta(minutes=5)
    assert interval_to_timedelta(*parse_interval("2w")) == timedelta(weeks=2)
    assert interval_to_timedelta(None, None) is None


@pytest.mark.parametrize("delta,expected", [
    (timedelta(days=2, hours=3, minutes=15, seconds=9), "2d 3h 15m"),
    (timedelta(hours=1), "1h"),
    (timedelta(seconds=42), "42s"),
    (timedelta(0), "0s"),
    (timedelta(seconds=-5), "0s"),
])
def test_format_duration(delta, expected):
    assert format_duration(delta) == expected


def test_log_level_filters_messages(capsys):
    try:
        set_log_level("warning")
        log_message("quiet", "info")
        log_message("loud", "error")
    finally:
        set_log_level("info")
    out = capsys.readouterr().out
    assert "quiet" not in out
    assert "loud" in out
