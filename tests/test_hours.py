# Tests for hours resolution: weekly schedule, date exceptions, boundaries, formatting,
# and the schedule store (fallback to defaults, wholesale save, exception CRUD).

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.exc import OperationalError, PendingRollbackError

from barbershop.models import ExceptionKind
from barbershop.schemas import HourExceptionIn, HourExceptionOut, WeeklyHoursIn, WeeklyHoursOut, WeeklyScheduleIn
from barbershop.services import hours

MONDAY = date(2024, 3, 11)
SUNDAY = date(2024, 3, 10)

def at(d, hh, mm=0, ss=0):
    return datetime(d.year, d.month, d.day, hh, mm, ss)

def week(mon=("09:00:00", "17:00:00")):
    days = []
    for dow in range(7):
        if dow == 1:
            days.append(WeeklyHoursOut(day_of_week=1, is_closed=False, open_time=mon[0], close_time=mon[1]))
        else:
            days.append(WeeklyHoursOut(day_of_week=dow, is_closed=True))
    return days

def exc(d, kind, open_time=None, close_time=None, label="Holiday"):
    return HourExceptionOut(id=1, date=d, kind=kind, label=label, open_time=open_time, close_time=close_time)


# ---------- engine ----------

def test_monday_boundaries():
    schedule = week()
    assert hours.is_open_now(schedule, [], at(MONDAY, 9)) is True
    assert hours.is_open_now(schedule, [], at(MONDAY, 17)) is False
    assert hours.is_open_now(schedule, [], at(MONDAY, 8, 59, 59)) is False
    assert hours.is_open_now(schedule, [], at(MONDAY, 16, 59, 59)) is True

def test_closed_weekday_is_closed_all_day():
    schedule = week()
    for h in range(24):
        assert hours.is_open_now(schedule, [], at(SUNDAY, h, 30)) is False

def test_closed_exception_overrides_open_day():
    schedule = week()
    closed = [exc(MONDAY, ExceptionKind.closed)]
    for h in (0, 9, 12, 16, 23):
        assert hours.is_open_now(schedule, closed, at(MONDAY, h)) is False
    # other dates unaffected
    next_monday = MONDAY + timedelta(days=7)
    assert hours.is_open_now(schedule, closed, at(next_monday, 10)) is True

def test_modified_exception_replaces_weekly_window():
    schedule = week()
    short = [exc(MONDAY, ExceptionKind.modified, "10:00:00", "14:00:00", label="Half day")]
    assert hours.is_open_now(schedule, short, at(MONDAY, 9, 30)) is False
    assert hours.is_open_now(schedule, short, at(MONDAY, 10)) is True
    assert hours.is_open_now(schedule, short, at(MONDAY, 13, 59, 59)) is True
    assert hours.is_open_now(schedule, short, at(MONDAY, 14)) is False
    assert hours.is_open_now(schedule, short, at(MONDAY, 16)) is False

def test_modified_exception_can_open_a_closed_weekday():
    special = [exc(SUNDAY, ExceptionKind.modified, "11:00:00", "15:00:00", label="Holiday market")]
    assert hours.is_open_now(week(), special, at(SUNDAY, 12)) is True

def test_aware_now_is_converted_to_business_zone():
    schedule = week()
    # 13:30 UTC on Monday = 09:30 EDT
    utc_now = datetime(2024, 3, 11, 13, 30, tzinfo=ZoneInfo("UTC"))
    assert hours.is_open_now(schedule, [], utc_now, "America/New_York") is True
    # 03:00 UTC Tuesday is still Monday 23:00 in New York → closed
    late = datetime(2024, 3, 12, 3, 0, tzinfo=ZoneInfo("UTC"))
    assert hours.is_open_now(schedule, [], late, "America/New_York") is False

def test_missing_times_means_closed():
    odd = [WeeklyHoursOut(day_of_week=1, is_closed=False, open_time=None, close_time="17:00:00")]
    assert hours.is_open_now(odd, [], at(MONDAY, 10)) is False
    assert hours.format_schedule_line(odd[0]) == "Closed"

def test_format_schedule_line():
    assert hours.format_schedule_line(week()[1]) == "9:00 AM – 5:00 PM"
    assert hours.format_schedule_line(week()[0]) == "Closed"
    sat = hours.DEFAULT_HOURS[6]
    assert hours.format_schedule_line(sat) == "7:00 AM – 12:00 PM"

def test_default_hours_shape():
    by_day = {h.day_of_week: h for h in hours.DEFAULT_HOURS}
    assert sorted(by_day) == list(range(7))
    assert by_day[0].is_closed and by_day[0].open_time is None
    assert (by_day[6].open_time, by_day[6].close_time) == ("07:00:00", "12:00:00")
    for dow in range(1, 6):
        assert (by_day[dow].open_time, by_day[dow].close_time) == ("09:00:00", "17:00:00")

def test_schedule_lines_are_ordered_and_named():
    lines = hours.schedule_lines(list(reversed(hours.DEFAULT_HOURS)))
    assert [l.day for l in lines][:2] == ["Sunday", "Monday"]
    assert lines[0].hours == "Closed"


# ---------- store ----------

class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("store down"))

    async def rollback(self):
        pass

class FailOnceSession:
    """Fails the first query and refuses further ones until rolled back."""

    def __init__(self, inner):
        self.inner = inner
        self.failed = False
        self.pending = False

    async def execute(self, *args, **kwargs):
        if self.pending:
            raise PendingRollbackError("transaction needs rollback")
        if not self.failed:
            self.failed = self.pending = True
            raise OperationalError("SELECT", {}, Exception("connection reset"))
        return await self.inner.execute(*args, **kwargs)

    async def rollback(self):
        self.pending = False
        await self.inner.rollback()

@pytest.mark.asyncio
async def test_weekly_hours_fall_back_when_store_down():
    assert await hours.get_weekly_hours(BrokenSession()) == hours.DEFAULT_HOURS
    assert await hours.get_upcoming_exceptions(BrokenSession(), MONDAY) == []

@pytest.mark.asyncio
async def test_failed_weekly_read_does_not_hide_exceptions(session):
    await hours.create_exception(session, HourExceptionIn(
        date=MONDAY, kind=ExceptionKind.closed, label="Holiday",
    ))
    flaky = FailOnceSession(session)
    assert await hours.get_weekly_hours(flaky) == hours.DEFAULT_HOURS
    found = await hours.get_upcoming_exceptions(flaky, MONDAY)
    assert [e.label for e in found] == ["Holiday"]

@pytest.mark.asyncio
async def test_weekly_hours_fall_back_when_empty(session):
    assert await hours.get_weekly_hours(session) == hours.DEFAULT_HOURS

@pytest.mark.asyncio
async def test_save_weekly_hours_upserts_by_weekday(session):
    days = [WeeklyHoursIn(day_of_week=d, is_closed=True) for d in range(7)]
    await hours.save_weekly_hours(session, WeeklyScheduleIn(days=days))

    days[3] = WeeklyHoursIn(day_of_week=3, open_time="10:00", close_time="18:00")
    saved = await hours.save_weekly_hours(session, WeeklyScheduleIn(days=days))

    assert len(saved) == 7
    wed = saved[3]
    assert (wed.day_of_week, wed.is_closed, wed.open_time, wed.close_time) == (3, False, "10:00:00", "18:00:00")
    assert len(await hours.get_weekly_hours(session)) == 7

@pytest.mark.asyncio
async def test_upcoming_exceptions_window(session):
    today = date(2024, 3, 11)
    for offset, label in ((-1, "past"), (0, "today"), (90, "edge"), (91, "too far")):
        await hours.create_exception(session, HourExceptionIn(
            date=today + timedelta(days=offset), kind="closed", label=label,
        ))
    found = await hours.get_upcoming_exceptions(session, today, 90)
    assert [e.label for e in found] == ["today", "edge"]

@pytest.mark.asyncio
async def test_exception_crud(session):
    created = await hours.create_exception(session, HourExceptionIn(
        date=date(2024, 7, 4), kind="closed", label="Independence Day",
    ))
    created_id = created.id
    with pytest.raises(hours.DuplicateExceptionDate):
        await hours.create_exception(session, HourExceptionIn(
            date=date(2024, 7, 4), kind="closed", label="Again",
        ))

    updated = await hours.update_exception(session, created_id, HourExceptionIn(
        date=date(2024, 7, 4), kind="modified", label="Short day", open_time="09:00", close_time="12:00",
    ))
    assert updated.kind == ExceptionKind.modified
    assert (updated.open_time, updated.close_time) == ("09:00:00", "12:00:00")

    assert await hours.update_exception(session, 999, HourExceptionIn(
        date=date(2024, 7, 5), kind="closed", label="x",
    )) is None
    assert await hours.delete_exception(session, created_id) is True
    assert await hours.delete_exception(session, created_id) is False
