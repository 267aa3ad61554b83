# barbershop/services/sales.py

# Sales aggregation over Square payments.
# Only COMPLETED payments count; amounts arrive in cents and are reported as exact Decimals.
# Windows are business-local calendar days [start 00:00, end+1 00:00) converted for the API.
# Multi-day reports fetch the whole range once and bucket by local day.
# A window that cannot be fetched is "unknown" (SalesDataUnavailable / None), never zero.

from __future__ import annotations
import asyncio
import calendar
import enum
import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from barbershop.schemas import DailySales, HourlySales, PaymentSummary, TopCustomer
from barbershop.services.square import Payment, SquareError
from barbershop.utils.timeofday import schedule_weekday

logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"
UNKNOWN_CUSTOMER = "Unknown Customer"
DEFAULT_TZ = "America/New_York"
CENT = Decimal("0.01")


class RankKey(str, enum.Enum):
    transactions = "transactions"
    gross_sales = "gross_sales"


class SalesDataUnavailable(Exception):
    """The payments source could not be read for a window."""


def to_money(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def summarize(payments: Iterable[Payment], window_start: date, window_end: date) -> DailySales:
    """Roll completed payments into one row anchored at window_start."""
    if window_end < window_start:
        raise ValueError("window_end is before window_start")
    gross = tips = count = 0
    for p in payments:
        if p.status != COMPLETED:
            continue
        gross += p.total_cents
        tips += p.tip_cents
        count += 1
    gross_sales, tip_total = to_money(gross), to_money(tips)
    return DailySales(
        date=window_start,
        gross_sales=gross_sales,
        tips=tip_total,
        net_sales=gross_sales - tip_total,
        transaction_count=count,
    )


def _rank_value(day: DailySales, rank_by: RankKey):
    if rank_by == RankKey.gross_sales:
        return day.gross_sales
    return day.transaction_count


class SalesEngine:
    def __init__(self, client, tzname: str = DEFAULT_TZ, now: Callable[[], datetime] | None = None):
        self.client = client
        self.tz = ZoneInfo(tzname)
        self._now = now or (lambda: datetime.now(self.tz))

    def today(self) -> date:
        now = self._now()
        if now.tzinfo is not None:
            now = now.astimezone(self.tz)
        return now.date()

    def _local(self, moment: datetime) -> datetime:
        return moment.astimezone(self.tz)

    async def _fetch(self, start: date, end: date) -> list[Payment]:
        begin = datetime.combine(start, time.min, tzinfo=self.tz)
        stop = datetime.combine(end + timedelta(days=1), time.min, tzinfo=self.tz)
        try:
            return await self.client.list_payments(begin, stop)
        except SquareError as e:
            raise SalesDataUnavailable(f"payments {start}..{end}: {e}") from e

    async def _completed_by_day(self, start: date, end: date) -> dict[date, list[Payment]]:
        buckets: dict[date, list[Payment]] = defaultdict(list)
        for p in await self._fetch(start, end):
            if p.status != COMPLETED:
                continue
            day = self._local(p.created_at).date()
            if start <= day <= end:
                buckets[day].append(p)
        return buckets

    async def window_summary(self, start: date, end: date) -> DailySales:
        return summarize(await self._fetch(start, end), start, end)

    async def daily_breakdown(self, days: int) -> list[DailySales]:
        """One row per day, today first, back to days-1 days ago."""
        if days <= 0:
            return []
        today = self.today()
        start = today - timedelta(days=days - 1)
        buckets = await self._completed_by_day(start, today)
        out = []
        for i in range(days):
            day = today - timedelta(days=i)
            out.append(summarize(buckets.get(day, []), day, day))
        return out

    async def top_busiest_days(
        self, window_days: int = 90, limit: int = 10, rank_by: RankKey = RankKey.transactions,
    ) -> list[DailySales]:
        """Days ranked by rank_by, descending; equal values go to the more recent day."""
        days = [d for d in await self.daily_breakdown(window_days) if _rank_value(d, rank_by) > 0]
        days.sort(key=lambda d: (_rank_value(d, rank_by), d.date), reverse=True)
        return days[:limit]

    async def monthly_calendar(self, year: int, month: int) -> dict[int, DailySales]:
        """Sparse {day_of_month: summary}; days without completed payments are absent.

        month is 0-based (0 = January, 11 = December).
        """
        if not 0 <= month <= 11:
            raise ValueError(f"month must be 0-11, got {month}")
        first = date(year, month + 1, 1)
        last = date(year, month + 1, calendar.monthrange(year, month + 1)[1])
        buckets = await self._completed_by_day(first, last)
        return {
            day.day: summarize(payments, day, day)
            for day, payments in sorted(buckets.items())
        }

    async def hourly_breakdown(self, day: date) -> list[HourlySales]:
        counts = [0] * 24
        cents = [0] * 24
        for p in (await self._completed_by_day(day, day)).get(day, []):
            hour = self._local(p.created_at).hour
            counts[hour] += 1
            cents[hour] += p.total_cents
        return [HourlySales(hour=h, count=counts[h], amount=to_money(cents[h])) for h in range(24)]

    async def top_customers(self, lookback_days: int = 90, limit: int = 10) -> list[TopCustomer]:
        """Customers ranked by total spent (then visits, then id). Anonymous payments are ignored."""
        today = self.today()
        start = today - timedelta(days=max(lookback_days, 1) - 1)
        spent: dict[str, int] = defaultdict(int)
        visits: dict[str, int] = defaultdict(int)
        for payments in (await self._completed_by_day(start, today)).values():
            for p in payments:
                if not p.customer_id:
                    continue
                spent[p.customer_id] += p.total_cents
                visits[p.customer_id] += 1

        ranked = sorted(spent, key=lambda cid: (-spent[cid], -visits[cid], cid))[:limit]
        return list(await asyncio.gather(
            *(self._resolve_customer(cid, spent[cid], visits[cid]) for cid in ranked)
        ))

    async def _resolve_customer(self, customer_id: str, cents: int, visit_count: int) -> TopCustomer:
        try:
            customer = await self.client.retrieve_customer(customer_id)
        except SquareError as e:
            logger.warning("customer lookup failed for %s: %s", customer_id, e)
            customer = None
        return TopCustomer(
            id=customer_id,
            name=(customer.display_name if customer else "") or UNKNOWN_CUSTOMER,
            email=customer.email if customer else None,
            phone=customer.phone if customer else None,
            total_spent=to_money(cents),
            visit_count=visit_count,
        )

    async def payment_summary(self) -> PaymentSummary:
        """Today / yesterday / this week (from Sunday) / this month, plus top 10 days by gross sales.

        Windows are fetched concurrently; one that fails comes back as None.
        """
        today = self.today()
        yesterday = today - timedelta(days=1)
        week_start = today - timedelta(days=schedule_weekday(today))
        month_start = today.replace(day=1)

        results = await asyncio.gather(
            self.window_summary(today, today),
            self.window_summary(yesterday, yesterday),
            self.window_summary(week_start, today),
            self.window_summary(month_start, today),
            self.top_busiest_days(limit=10, rank_by=RankKey.gross_sales),
            return_exceptions=True,
        )
        values = []
        for r in results:
            if isinstance(r, SalesDataUnavailable):
                logger.warning("summary window unavailable: %s", r)
                values.append(None)
            elif isinstance(r, BaseException):
                raise r
            else:
                values.append(r)
        return PaymentSummary(
            today=values[0], yesterday=values[1], this_week=values[2], this_month=values[3], top_days=values[4],
        )
