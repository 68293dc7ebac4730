"""
FILE: scratchpad/core/colors.py
PURPOSE: Hex color parsing and palette helpers
EXPORTS:
  - parse_hex(value) -> Optional[int]
  - is_valid_hex(value) -> bool
  - normalize_hex(value) -> str
  - color_or_default(value) -> str
  - color_at(index) -> str
  - to_rgb(value) -> Optional[Tuple[int, int, int]]
DEPENDENCIES:
  - string (stdlib)
  - scratchpad.core.constants (PALETTE, DEFAULT_ACCENT)
  - scratchpad.core.exceptions (InvalidColorError)
NOTES:
  - Accepts 6 hex digits with an optional leading '#', any case
  - Display paths fall back to DEFAULT_ACCENT instead of failing
"""

import string
from typing import Optional, Tuple

from .constants import PALETTE, DEFAULT_ACCENT
from .exceptions import InvalidColorError

_HEX_DIGITS = set(string.hexdigits)


def parse_hex(value: Optional[str]) -> Optional[int]:
    """
    Parse a hex color string into its 24-bit RGB integer.

    Returns:
        Integer in [0x000000, 0xFFFFFF], or None if the value is not a color
    """
    if value is None:
        return None
    hex_string = value.strip().upper()
    if hex_string.startswith("#"):
        hex_string = hex_string[1:]
    # int(..., 16) alone would also accept "0x", "_" and signs
    if len(hex_string) != 6 or not set(hex_string) <= _HEX_DIGITS:
        return None
    return int(hex_string, 16)


def is_valid_hex(value: Optional[str]) -> bool:
    return parse_hex(value) is not None


def normalize_hex(value: str) -> str:
    """
    Canonical '#RRGGBB' form of a color.

    Raises:
        InvalidColorError: If value is not a valid hex color
    """
    rgb = parse_hex(value)
    if rgb is None:
        raise InvalidColorError(value)
    return f"#{rgb:06X}"


def color_or_default(value: Optional[str]) -> str:
    """Return the canonical color, or the default accent if it doesn't parse."""
    rgb = parse_hex(value)
    if rgb is None:
        return DEFAULT_ACCENT
    return f"#{rgb:06X}"


def color_at(index: int) -> str:
    """Palette entry at index, wrapping around."""
    return PALETTE[index % len(PALETTE)]


def to_rgb(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    rgb = parse_hex(value)
    if rgb is None:
        return None
    return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF
