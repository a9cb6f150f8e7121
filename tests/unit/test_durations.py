from datetime import timedelta

import pytest

from logpull_exporter.utils.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    "value, expected",
    [
        (timedelta(0), "0s"),
        (timedelta(minutes=1), "1m"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(hours=1, minutes=30), "1h30m"),
        (timedelta(days=8), "8d"),
        (timedelta(days=14), "2w"),
        (timedelta(days=7, hours=1), "7d1h"),
        (timedelta(days=365), "1y"),
        (timedelta(milliseconds=1500), "1s500ms"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected


def test_format_duration_rejects_negative():
    with pytest.raises(ValueError):
        format_duration(timedelta(seconds=-1))


def test_parse_duration_accepts_compound_units():
    assert parse_duration("1h30m") == timedelta(hours=1, minutes=30)
    assert parse_duration(" 90s ") == timedelta(seconds=90)
    assert parse_duration("250ms") == timedelta(milliseconds=250)


@pytest.mark.parametrize("text", ["", "5", "1x", "m1", "1m1h"])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_duration(text)
