# barbershop/api/reports.py

# Sales reporting endpoints backed by Square.
# /reports/summary → today / yesterday / week / month + top 10 days by gross sales (failed windows are null).
# /reports/customers → top N customers over the last D days (named_only hides "Unknown Customer").
# /reports/calendar → per-day totals for a month (0-based, 0 = January) + top 10 days by transaction count.
# /reports/hourly → 24 hourly buckets for one day.
# 503 when Square is not configured, 502 when Square could not be read.

from __future__ import annotations
import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from barbershop.api.deps import get_sales_engine
from barbershop.schemas import CalendarResponse, HourlySales, PaymentSummary, TopCustomer
from barbershop.services.sales import UNKNOWN_CUSTOMER, RankKey, SalesDataUnavailable, SalesEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports")


def _unavailable(what: str, e: Exception) -> HTTPException:
    logger.error("failed to fetch %s: %s", what, e)
    return HTTPException(status_code=502, detail=f"Failed to fetch {what}")


@router.get("/summary", response_model=PaymentSummary)
async def summary(engine: SalesEngine = Depends(get_sales_engine)):
    return await engine.payment_summary()


@router.get("/customers", response_model=list[TopCustomer])
async def customers(
    days: int = Query(90, ge=1, le=365),
    limit: int = Query(10, ge=1, le=100),
    named_only: bool = False,
    engine: SalesEngine = Depends(get_sales_engine),
):
    try:
        ranked = await engine.top_customers(days, limit)
    except SalesDataUnavailable as e:
        raise _unavailable("customers", e)
    if named_only:
        ranked = [c for c in ranked if c.name != UNKNOWN_CUSTOMER]
    return ranked


@router.get("/calendar", response_model=CalendarResponse)
async def month_calendar(
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=0, le=11),
    engine: SalesEngine = Depends(get_sales_engine),
):
    today = engine.today()
    if year is None:
        year = today.year
    if month is None:
        month = today.month - 1
    try:
        days = await engine.monthly_calendar(year, month)
        top = await engine.top_busiest_days(limit=10, rank_by=RankKey.transactions)
    except SalesDataUnavailable as e:
        raise _unavailable("calendar", e)
    return CalendarResponse(year=year, month=month, calendar=days, top_days=top)


@router.get("/hourly", response_model=list[HourlySales])
async def hourly(day: date | None = None, engine: SalesEngine = Depends(get_sales_engine)):
    try:
        return await engine.hourly_breakdown(day or engine.today())
    except SalesDataUnavailable as e:
        raise _unavailable("hourly breakdown", e)
