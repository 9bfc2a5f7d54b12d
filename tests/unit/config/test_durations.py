"""Unit tests for Go-style duration parsing and formatting."""

from __future__ import annotations

from datetime import timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from authproxy.config.durations import DurationError, format_duration, parse_duration


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", timedelta(0)),
        ("168h", timedelta(hours=168)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1.5)),
        ("250ms", timedelta(milliseconds=250)),
        ("10us", timedelta(microseconds=10)),
        ("10µs", timedelta(microseconds=10)),
        ("-5m", timedelta(minutes=-5)),
        (" 2h ", timedelta(hours=2)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "h", "1d", "abc", "1.h5", "-"])
def test_parse_duration_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(DurationError):
        parse_duration(raw)


def test_parse_duration_reports_missing_unit() -> None:
    with pytest.raises(DurationError, match="missing unit"):
        parse_duration("30")


@pytest.mark.parametrize("raw", ["99999999999999h", "-99999999999999h", "1" + "0" * 400 + "s"])
def test_parse_duration_rejects_out_of_range_values(raw: str) -> None:
    with pytest.raises(DurationError, match="out of range"):
        parse_duration(raw)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), "0s"),
        (timedelta(hours=168), "168h0m0s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(minutes=1, seconds=30), "1m30s"),
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(milliseconds=500), "500ms"),
        (timedelta(microseconds=7), "7µs"),
        (timedelta(minutes=-2), "-2m0s"),
    ],
)
def test_format_duration(value: timedelta, expected: str) -> None:
    assert format_duration(value) == expected


@given(seconds=st.integers(min_value=0, max_value=10 * 365 * 24 * 3600))
@settings(max_examples=50, derandomize=True, deadline=None)
def test_formatted_durations_parse_back(seconds: int) -> None:
    value = timedelta(seconds=seconds)

    assert parse_duration(format_duration(value)) == value
