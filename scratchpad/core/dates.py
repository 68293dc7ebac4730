"""
FILE: scratchpad/core/dates.py
PURPOSE: Timestamp formatting, parsing, and relative display strings
EXPORTS:
  - utc_now() -> datetime
  - format_timestamp(when) -> str
  - parse_timestamp(value) -> datetime
  - now_iso() -> str
  - relative_string(when, now) -> str
  - MINUTE, HOUR, DAY, WEEK (seconds)
DEPENDENCIES:
  - datetime (stdlib)
NOTES:
  - Wire and storage format is ISO 8601 in UTC with a 'Z' suffix
  - Fractional seconds are kept only when non-zero
  - Timestamps without a timezone are rejected by parse_timestamp()
  - Parsing uses the Python 3.11+ datetime.fromisoformat() grammar
"""

from datetime import datetime, timezone
from typing import Optional, Union

MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(when: datetime) -> str:
    """Render an aware datetime as canonical ISO 8601 UTC ('...Z')."""
    if when.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")
    text = when.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp that carries a timezone.

    Raises:
        ValueError: If the string is not ISO 8601 or has no timezone
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp '{value}' has no timezone")
    return parsed


def now_iso() -> str:
    return format_timestamp(utc_now())


def relative_string(
    when: Union[datetime, str], now: Optional[datetime] = None
) -> str:
    """
    Human-readable relative time ("now", "5m ago", "3h ago", "2d ago").

    Older than a week falls back to a short date (YYYY-MM-DD).
    Future timestamps return "future".
    """
    if isinstance(when, str):
        when = parse_timestamp(when)
    now = now or utc_now()
    interval = (now - when).total_seconds()

    if interval < 0:
        return "future"
    if interval < MINUTE:
        return "now"
    if interval < HOUR:
        return f"{int(interval // MINUTE)}m ago"
    if interval < DAY:
        return f"{int(interval // HOUR)}h ago"
    if interval < WEEK:
        return f"{int(interval // DAY)}d ago"
    return when.astimezone(timezone.utc).strftime("%Y-%m-%d")
