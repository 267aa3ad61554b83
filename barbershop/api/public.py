# barbershop/api/public.py

# Public page data.
# /hours → open-now flag, formatted weekly schedule and upcoming exceptions (next 90 days).
# /services → active price list.
# Both degrade to built-in defaults instead of erroring when the store is empty or down.

from __future__ import annotations
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.config import settings
from barbershop.db import get_session
from barbershop.schemas import HourExceptionOut, PublicHours, ServiceOut
from barbershop.services import catalog, hours

router = APIRouter()


@router.get("/hours", response_model=PublicHours)
async def public_hours(session: AsyncSession = Depends(get_session)):
    tzname = settings.BUSINESS_TIMEZONE
    now = datetime.now(ZoneInfo(tzname))
    weekly = await hours.get_weekly_hours(session)
    exceptions = await hours.get_upcoming_exceptions(session, now.date(), settings.EXCEPTION_LOOKAHEAD_DAYS)
    return PublicHours(
        is_open=hours.is_open_now(weekly, exceptions, now, tzname),
        timezone=tzname,
        schedule=hours.schedule_lines(weekly),
        exceptions=[HourExceptionOut.model_validate(e) for e in exceptions],
    )


@router.get("/services", response_model=list[ServiceOut])
async def public_services(session: AsyncSession = Depends(get_session)):
    return await catalog.get_active_services(session)
