# barbershop/services/hours.py

# Hours resolution: decides whether the shop is open at a given instant.
# A date-specific exception (closed / modified hours) overrides the weekly schedule for that date.
# All decisions happen in the business time zone; times compare as seconds since midnight, [open, close).
# Reads fall back to the built-in default week / no exceptions when the store is empty or unreachable.
# Admin writes: wholesale weekly upsert keyed by weekday, exception create/update/delete by id.

from __future__ import annotations
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.models import ExceptionKind, HourException, WeeklyHours
from barbershop.schemas import HourExceptionIn, ScheduleLine, WeeklyHoursOut, WeeklyScheduleIn
from barbershop.utils.timeofday import (
    DAY_NAMES, format_12h, schedule_weekday, seconds_of_day, to_seconds,
)

logger = logging.getLogger(__name__)

DEFAULT_TZ = "America/New_York"

# Sunday closed, Saturday mornings, weekdays 9-5
DEFAULT_HOURS: list[WeeklyHoursOut] = [
    WeeklyHoursOut(
        day_of_week=dow,
        is_closed=dow == 0,
        open_time=None if dow == 0 else "07:00:00" if dow == 6 else "09:00:00",
        close_time=None if dow == 0 else "12:00:00" if dow == 6 else "17:00:00",
    )
    for dow in range(7)
]


class DuplicateExceptionDate(Exception):
    """An exception already exists for this calendar date."""


# ---------- engine ----------

def to_business_time(now: datetime, tzname: str = DEFAULT_TZ) -> datetime:
    """Aware datetimes are converted; naive ones are taken as business-local wall time."""
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(tzname))


def _within(t: int, open_time, close_time) -> bool:
    start, end = to_seconds(open_time), to_seconds(close_time)
    if start is None or end is None:
        return False
    return start <= t < end


def is_open_now(schedule: Sequence, exceptions: Iterable, now: datetime, tzname: str = DEFAULT_TZ) -> bool:
    """True when `now` falls inside today's opening window.

    `schedule` and `exceptions` are any objects exposing the weekly_hours / hour_exceptions
    attributes (ORM rows or schemas).
    """
    local = to_business_time(now, tzname)
    today = local.date()
    t = seconds_of_day(local)

    for exc in exceptions:
        if exc.date != today:
            continue
        if exc.kind == ExceptionKind.closed:
            return False
        # modified hours replace the weekly entry outright
        return _within(t, exc.open_time, exc.close_time)

    dow = schedule_weekday(today)
    entry = next((h for h in schedule if h.day_of_week == dow), None)
    if entry is None or entry.is_closed:
        return False
    return _within(t, entry.open_time, entry.close_time)


def format_schedule_line(entry) -> str:
    if entry.is_closed or not entry.open_time or not entry.close_time:
        return "Closed"
    return f"{format_12h(entry.open_time)} – {format_12h(entry.close_time)}"


def schedule_lines(schedule: Sequence) -> list[ScheduleLine]:
    return [
        ScheduleLine(day_of_week=h.day_of_week, day=DAY_NAMES[h.day_of_week], hours=format_schedule_line(h))
        for h in sorted(schedule, key=lambda h: h.day_of_week)
    ]


def business_today(tzname: str = DEFAULT_TZ, now: datetime | None = None) -> date:
    now = now or datetime.now(ZoneInfo(tzname))
    return to_business_time(now, tzname).date()


# ---------- store reads ----------

async def _fetch_weekly(session: AsyncSession) -> list[WeeklyHours]:
    rows = await session.execute(select(WeeklyHours).order_by(WeeklyHours.day_of_week))
    return list(rows.scalars().all())


async def _fetch_exceptions(session: AsyncSession, start: date, end: date) -> list[HourException]:
    rows = await session.execute(
        select(HourException)
        .where(HourException.date >= start)
        .where(HourException.date <= end)
        .order_by(HourException.date)
    )
    return list(rows.scalars().all())


async def get_weekly_hours(session: AsyncSession) -> list:
    """Persisted week, or DEFAULT_HOURS when nothing is stored or the store is down."""
    try:
        rows = await _fetch_weekly(session)
    except (SQLAlchemyError, OSError) as e:
        logger.warning("weekly hours unavailable, using defaults: %s", e)
        await session.rollback()
        return list(DEFAULT_HOURS)
    if not rows:
        return list(DEFAULT_HOURS)
    return rows


async def get_upcoming_exceptions(session: AsyncSession, today: date, days: int = 90) -> list:
    try:
        return await _fetch_exceptions(session, today, today + timedelta(days=days))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("hour exceptions unavailable: %s", e)
        await session.rollback()
        return []


# ---------- admin writes ----------

async def admin_weekly_hours(session: AsyncSession) -> list:
    """Admin view: stored week, or the defaults for the admin to save. Store errors propagate."""
    rows = await _fetch_weekly(session)
    return rows or list(DEFAULT_HOURS)


async def admin_exceptions(session: AsyncSession, today: date, days: int = 90) -> list[HourException]:
    return await _fetch_exceptions(session, today, today + timedelta(days=days))


async def save_weekly_hours(session: AsyncSession, schedule: WeeklyScheduleIn) -> list[WeeklyHours]:
    existing = {h.day_of_week: h for h in await _fetch_weekly(session)}
    for day in schedule.days:
        row = existing.get(day.day_of_week)
        if row is None:
            row = WeeklyHours(day_of_week=day.day_of_week)
            session.add(row)
        row.is_closed = day.is_closed
        row.open_time = day.open_time
        row.close_time = day.close_time
    await session.commit()
    logger.info("weekly hours saved")
    return await _fetch_weekly(session)


async def create_exception(session: AsyncSession, data: HourExceptionIn) -> HourException:
    exc = HourException(**data.model_dump())
    session.add(exc)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise DuplicateExceptionDate(f"an exception already exists for {data.date}") from None
    logger.info("hour exception added for %s (%s)", data.date, data.kind.value)
    return exc


async def update_exception(session: AsyncSession, exception_id: int, data: HourExceptionIn) -> HourException | None:
    exc = await session.get(HourException, exception_id)
    if exc is None:
        return None
    for field, value in data.model_dump().items():
        setattr(exc, field, value)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise DuplicateExceptionDate(f"an exception already exists for {data.date}") from None
    return exc


async def delete_exception(session: AsyncSession, exception_id: int) -> bool:
    exc = await session.get(HourException, exception_id)
    if exc is None:
        return False
    await session.delete(exc)
    await session.commit()
    logger.info("hour exception %s deleted", exception_id)
    return True
