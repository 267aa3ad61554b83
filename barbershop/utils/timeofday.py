# barbershop/utils/timeofday.py

# Time-of-day helpers for the hours engine.
# Stored values are "HH:MM:SS" strings; everything in between works on seconds since midnight.
# Weekdays follow the schedule convention 0=Sunday..6=Saturday (Python's weekday() is 0=Monday).
# Also renders 12-hour display strings ("9:00 AM") for the public schedule.

from __future__ import annotations
from datetime import date, datetime, time

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

SECONDS_PER_DAY = 24 * 60 * 60


def to_seconds(value: str | time | None) -> int | None:
    """Parse 'H:M', 'HH:MM' or 'HH:MM:SS' (or a datetime.time) into seconds since midnight."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.hour * 3600 + value.minute * 60 + value.second
    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"invalid time of day: {value!r}")
    try:
        h, m = int(parts[0]), int(parts[1])
        s = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        raise ValueError(f"invalid time of day: {value!r}") from None
    if not (0 <= h < 24 and 0 <= m < 60 and 0 <= s < 60):
        raise ValueError(f"time of day out of range: {value!r}")
    return h * 3600 + m * 60 + s


def to_hhmmss(seconds: int) -> str:
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def normalize(value: str | time | None) -> str | None:
    """Canonical zero-padded 'HH:MM:SS' form, or None."""
    secs = to_seconds(value)
    return None if secs is None else to_hhmmss(secs)


def seconds_of_day(moment: datetime) -> int:
    return moment.hour * 3600 + moment.minute * 60 + moment.second


def format_12h(value: str | time | None) -> str:
    """'17:00:00' -> '5:00 PM'; midnight and noon both render as 12."""
    secs = to_seconds(value)
    if secs is None:
        return ""
    h, rem = divmod(secs, 3600)
    m = rem // 60
    suffix = "PM" if h >= 12 else "AM"
    h12 = h % 12 or 12
    return f"{h12}:{m:02d} {suffix}"


def schedule_weekday(d: date) -> int:
    """0=Sunday..6=Saturday."""
    return (d.weekday() + 1) % 7
