# barbershop/schemas.py

# Pydantic schemas for API request/response models.
# Admin inputs validate the schedule invariants (times present and close > open unless closed).
# Sales models carry money as exact Decimals and serialize them to JSON numbers.
from __future__ import annotations

from datetime import date as Date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator, model_validator

from barbershop.models import ExceptionKind
from barbershop.utils.timeofday import normalize, to_seconds

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _check_window(open_time: str | None, close_time: str | None) -> None:
    if not open_time or not close_time:
        raise ValueError("open_time and close_time are required")
    if to_seconds(close_time) <= to_seconds(open_time):
        raise ValueError("close_time must be after open_time")


# ---------- hours ----------

class WeeklyHoursIn(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    is_closed: bool = False
    open_time: str | None = None
    close_time: str | None = None

    @field_validator("open_time", "close_time")
    @classmethod
    def _normalize_time(cls, v: str | None) -> str | None:
        return normalize(v)

    @model_validator(mode="after")
    def _check_hours(self) -> "WeeklyHoursIn":
        if self.is_closed:
            self.open_time = None
            self.close_time = None
        else:
            _check_window(self.open_time, self.close_time)
        return self


class WeeklyScheduleIn(BaseModel):
    days: list[WeeklyHoursIn]

    @model_validator(mode="after")
    def _full_week(self) -> "WeeklyScheduleIn":
        if sorted(d.day_of_week for d in self.days) != list(range(7)):
            raise ValueError("schedule must contain exactly one entry per weekday (0-6)")
        return self


class WeeklyHoursOut(BaseModel):
    id: int | None = None
    day_of_week: int
    is_closed: bool
    open_time: str | None = None
    close_time: str | None = None
    model_config = ConfigDict(from_attributes=True)


class HourExceptionIn(BaseModel):
    date: Date
    kind: ExceptionKind
    label: str
    open_time: str | None = None
    close_time: str | None = None
    notes: str | None = None

    @field_validator("open_time", "close_time")
    @classmethod
    def _normalize_time(cls, v: str | None) -> str | None:
        return normalize(v)

    @field_validator("label")
    @classmethod
    def _label_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("label is required")
        return v

    @field_validator("notes")
    @classmethod
    def _blank_notes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def _check_hours(self) -> "HourExceptionIn":
        if self.kind == ExceptionKind.modified:
            _check_window(self.open_time, self.close_time)
        else:
            self.open_time = None
            self.close_time = None
        return self


class HourExceptionOut(BaseModel):
    id: int
    date: Date
    kind: ExceptionKind
    label: str
    open_time: str | None = None
    close_time: str | None = None
    notes: str | None = None
    model_config = ConfigDict(from_attributes=True)


class ScheduleLine(BaseModel):
    day_of_week: int
    day: str
    hours: str


class PublicHours(BaseModel):
    is_open: bool
    timezone: str
    schedule: list[ScheduleLine]
    exceptions: list[HourExceptionOut]


# ---------- services (price list) ----------

class ServiceIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    icon: Literal["scissors", "user", "userCheck"] = "scissors"
    accent_color: Literal["red", "blue"] = "red"
    display_order: int = 0
    is_active: bool = True


class ServiceOut(BaseModel):
    id: int | None = None
    name: str
    description: str | None = None
    price: Money
    icon: str
    accent_color: str
    display_order: int
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


# ---------- sales ----------

class DailySales(BaseModel):
    date: Date
    gross_sales: Money
    tips: Money
    net_sales: Money
    transaction_count: int


class HourlySales(BaseModel):
    hour: int
    count: int
    amount: Money


class TopCustomer(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    total_spent: Money
    visit_count: int


class PaymentSummary(BaseModel):
    # None means the window could not be fetched, not "no sales"
    today: DailySales | None
    yesterday: DailySales | None
    this_week: DailySales | None
    this_month: DailySales | None
    top_days: list[DailySales] | None


class CalendarResponse(BaseModel):
    year: int
    month: int
    calendar: dict[int, DailySales]
    top_days: list[DailySales]
