# barbershop/seed.py

# Seeding script for the schedule store.
# Reads and normalizes weekly-hours and hour-exception CSVs (any of the usual column spellings).
# Weekly hours are saved wholesale; exceptions are upserted by date.
# Without a weekly-hours CSV, an empty store gets the default week so the admin panel starts populated.
# Prints row counts when done.

from __future__ import annotations

import asyncio
import os

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.config import settings
from barbershop.db import engine, SessionLocal
from barbershop.models import HourException, WeeklyHours
from barbershop.schemas import HourExceptionIn, WeeklyHoursIn, WeeklyScheduleIn
from barbershop.services.hours import DEFAULT_HOURS, save_weekly_hours
import barbershop.models as models  # ensure models are registered


# ---------- helpers ----------

def _truthy(val) -> bool:
    return str(val).strip().lower() in {"1", "true", "yes", "y", "closed", "x"}

def _read_csv(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(f"CSV not found: {path}")
    return pd.read_csv(path)

def _ensure_time_str(x) -> str | None:
    """Return HH:MM:SS string from 'H:M'/'H:M:S'/'9:00 AM'; None for blanks."""
    if x is None or pd.isna(x) or not str(x).strip():
        return None
    return pd.to_datetime(str(x).strip()).strftime("%H:%M:%S")

def _text(x) -> str | None:
    """Stripped cell text; None for blanks and NaN."""
    if x is None or pd.isna(x) or not str(x).strip():
        return None
    return str(x).strip()

def _clean(df: pd.DataFrame, renames: dict[str, tuple[str, ...]]) -> pd.DataFrame:
    df = df.copy()
    df.columns = [c.strip().lower() for c in df.columns]
    for target, aliases in renames.items():
        if target in df.columns:
            continue
        for c in aliases:
            if c in df.columns:
                df.rename(columns={c: target}, inplace=True)
                break
    return df


def hours_from_frame(df: pd.DataFrame) -> WeeklyScheduleIn:
    df = _clean(df, {
        "day_of_week": ("dayofweek", "day", "dow", "weekday"),
        "open_time": ("open", "start_time_local", "start"),
        "close_time": ("close", "end_time_local", "end"),
        "is_closed": ("closed",),
    })
    if "day_of_week" not in df.columns:
        raise ValueError("weekly hours CSV must contain 'day_of_week' (0=Sun..6=Sat).")

    days = []
    for row in df.to_dict(orient="records"):
        open_time = _ensure_time_str(row.get("open_time"))
        close_time = _ensure_time_str(row.get("close_time"))
        is_closed = _truthy(row.get("is_closed", "")) or not (open_time and close_time)
        days.append(WeeklyHoursIn(
            day_of_week=int(row["day_of_week"]),
            is_closed=is_closed,
            open_time=open_time,
            close_time=close_time,
        ))
    return WeeklyScheduleIn(days=days)


def exceptions_from_frame(df: pd.DataFrame) -> list[HourExceptionIn]:
    df = _clean(df, {
        "kind": ("type",),
        "open_time": ("open",),
        "close_time": ("close",),
        "label": ("name", "description"),
    })
    if "date" not in df.columns:
        raise ValueError("exceptions CSV must contain 'date'.")

    out = []
    for i, row in enumerate(df.to_dict(orient="records")):
        when = _text(row.get("date"))
        if when is None:
            raise ValueError(f"exceptions CSV row {i + 1}: blank date")
        out.append(HourExceptionIn(
            date=pd.to_datetime(when).date(),
            kind=(_text(row.get("kind")) or "closed").lower(),
            label=_text(row.get("label")) or "",
            open_time=_ensure_time_str(row.get("open_time")),
            close_time=_ensure_time_str(row.get("close_time")),
            notes=_text(row.get("notes")),
        ))
    return out


async def _upsert_exceptions(session: AsyncSession, items: list[HourExceptionIn]) -> int:
    existing = {
        e.date: e for e in (await session.execute(select(HourException))).scalars().all()
    }
    for item in items:
        row = existing.get(item.date)
        if row is None:
            row = HourException(date=item.date)
            session.add(row)
            existing[item.date] = row
        for field, value in item.model_dump().items():
            setattr(row, field, value)
    await session.commit()
    return len(items)


# ---------- public entrypoint ----------

async def seed(session: AsyncSession, hours_df: pd.DataFrame | None = None,
               exceptions_df: pd.DataFrame | None = None) -> tuple[int, int]:
    n_hours = 0
    if hours_df is not None:
        n_hours = len(await save_weekly_hours(session, hours_from_frame(hours_df)))
    else:
        stored = (await session.execute(select(WeeklyHours.id))).scalars().first()
        if stored is None:
            defaults = WeeklyScheduleIn(days=[WeeklyHoursIn(**h.model_dump(exclude={"id"})) for h in DEFAULT_HOURS])
            n_hours = len(await save_weekly_hours(session, defaults))

    n_exc = 0
    if exceptions_df is not None:
        n_exc = await _upsert_exceptions(session, exceptions_from_frame(exceptions_df))
    return n_hours, n_exc


async def main(hours_csv: str | None, exceptions_csv: str | None) -> None:
    # create tables if not present (safe)
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)

    async with SessionLocal() as session:
        hours_df = _read_csv(hours_csv) if hours_csv else None
        exc_df = _read_csv(exceptions_csv) if exceptions_csv else None
        n1, n2 = await seed(session, hours_df, exc_df)
        print(f"Seed complete. Rows => weekly_hours:{n1} hour_exceptions:{n2}")


if __name__ == "__main__":
    print(f"Using:\n  HOURS_CSV={settings.HOURS_CSV or '(defaults)'}\n  EXCEPTIONS_CSV={settings.EXCEPTIONS_CSV or '-'}\n")
    asyncio.run(main(settings.HOURS_CSV, settings.EXCEPTIONS_CSV))
