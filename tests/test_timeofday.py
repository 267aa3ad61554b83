# Unit tests for time-of-day helpers (parsing, 12h rendering, Sunday-based weekdays).

from datetime import date, time

import pytest

from barbershop.utils.timeofday import format_12h, normalize, schedule_weekday, to_seconds


def test_to_seconds_accepts_short_and_long_forms():
    assert to_seconds("09:00") == 9 * 3600
    assert to_seconds("9:05") == 9 * 3600 + 5 * 60
    assert to_seconds("17:30:15") == 17 * 3600 + 30 * 60 + 15
    assert to_seconds(time(8, 59, 59)) == 8 * 3600 + 59 * 60 + 59
    assert to_seconds(None) is None
    assert to_seconds("") is None

@pytest.mark.parametrize("bad", ["25:00", "12:60", "noon", "1:2:3:4"])
def test_to_seconds_rejects_garbage(bad):
    with pytest.raises(ValueError):
        to_seconds(bad)

def test_normalize_pads():
    assert normalize("9:00") == "09:00:00"
    assert normalize(None) is None

@pytest.mark.parametrize("value,expected", [
    ("00:00:00", "12:00 AM"),
    ("00:30:00", "12:30 AM"),
    ("07:00:00", "7:00 AM"),
    ("12:00:00", "12:00 PM"),
    ("12:45:00", "12:45 PM"),
    ("17:05:00", "5:05 PM"),
    ("23:59:00", "11:59 PM"),
])
def test_format_12h(value, expected):
    assert format_12h(value) == expected

def test_schedule_weekday_is_sunday_based():
    assert schedule_weekday(date(2024, 3, 10)) == 0  # Sunday
    assert schedule_weekday(date(2024, 3, 11)) == 1  # Monday
    assert schedule_weekday(date(2024, 3, 16)) == 6  # Saturday
