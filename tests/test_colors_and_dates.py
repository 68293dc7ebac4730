"""
Tests for color parsing and the relative/ISO date helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from scratchpad.core import colors, dates
from scratchpad.core.constants import PALETTE, DEFAULT_ACCENT
from scratchpad.core.exceptions import InvalidColorError, InvalidInputError


# --- Colors ---

@pytest.mark.parametrize(
    "value, expected",
    [
        ("#6EA8FE", 0x6EA8FE),
        ("6ea8fe", 0x6EA8FE),
        ("  #e8a87c  ", 0xE8A87C),
        ("#000000", 0x000000),
        ("FFFFFF", 0xFFFFFF),
    ],
)
def test_parse_hex_accepts_six_digit_colors(value, expected):
    assert colors.parse_hex(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", "#", "#12345", "#1234567", "GGGGGG", "not a color", "0x1234", "+12345", "12_345", None],
)
def test_parse_hex_rejects_everything_else(value):
    assert colors.parse_hex(value) is None
    assert not colors.is_valid_hex(value)


def test_normalize_hex_canonical_form():
    assert colors.normalize_hex("e8a87c") == "#E8A87C"
    assert colors.normalize_hex(" #41b3a3") == "#41B3A3"


def test_normalize_hex_invalid_raises():
    with pytest.raises(InvalidColorError):
        colors.normalize_hex("#GGG")


def test_invalid_color_is_invalid_input():
    assert issubclass(InvalidColorError, InvalidInputError)


def test_color_or_default_falls_back_to_accent():
    assert colors.color_or_default("bogus") == DEFAULT_ACCENT
    assert colors.color_or_default("") == DEFAULT_ACCENT
    assert colors.color_or_default("#c38d9e") == "#C38D9E"


def test_to_rgb():
    assert colors.to_rgb("#E27D60") == (0xE2, 0x7D, 0x60)
    assert colors.to_rgb("nope") is None


def test_palette_has_eight_valid_distinct_colors():
    assert len(PALETTE) == 8
    assert len(set(PALETTE)) == 8
    assert all(colors.is_valid_hex(c) for c in PALETTE)


def test_color_at_wraps():
    assert colors.color_at(0) == PALETTE[0]
    assert colors.color_at(8) == PALETTE[0]
    assert colors.color_at(11) == PALETTE[3]


# --- Dates ---

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=-5), "future"),
        (timedelta(seconds=0), "now"),
        (timedelta(seconds=59), "now"),
        (timedelta(minutes=1), "1m ago"),
        (timedelta(minutes=59, seconds=59), "59m ago"),
        (timedelta(hours=1), "1h ago"),
        (timedelta(hours=23), "23h ago"),
        (timedelta(days=1), "1d ago"),
        (timedelta(days=6, hours=23), "6d ago"),
        (timedelta(days=7), "2025-01-08"),
        (timedelta(days=30), "2024-12-16"),
    ],
)
def test_relative_string(delta, expected):
    assert dates.relative_string(NOW - delta, now=NOW) == expected


def test_relative_string_accepts_iso_strings():
    assert dates.relative_string("2025-01-15T11:55:00Z", now=NOW) == "5m ago"


def test_format_timestamp_is_utc_with_z():
    when = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert dates.format_timestamp(when) == "2025-01-15T10:30:00Z"


def test_format_timestamp_converts_offsets():
    when = datetime(2025, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))
    assert dates.format_timestamp(when) == "2025-01-15T10:30:00Z"


def test_format_timestamp_rejects_naive():
    with pytest.raises(ValueError):
        dates.format_timestamp(datetime(2025, 1, 15, 10, 30))


def test_parse_timestamp_round_trip():
    text = "2025-01-15T10:30:00.250000Z"
    assert dates.format_timestamp(dates.parse_timestamp(text)) == text


@pytest.mark.parametrize("value", ["2025-01-15T10:30:00", "yesterday", ""])
def test_parse_timestamp_rejects_bad_input(value):
    with pytest.raises(ValueError):
        dates.parse_timestamp(value)


def test_now_iso_parses_back():
    parsed = dates.parse_timestamp(dates.now_iso())
    assert parsed.tzinfo is not None
