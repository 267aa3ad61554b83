# barbershop/models.py

# SQLAlchemy ORM models for the schedule store.
# weekly_hours holds the 7-row recurring week (0=Sun..6=Sat), unique per weekday.
# hour_exceptions holds sparse date-keyed overrides (closed / modified hours), unique per date.
# services holds the public price list edited from the admin panel.


from __future__ import annotations
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, Boolean, Date, DateTime, Enum, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from barbershop.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExceptionKind(str, enum.Enum):
    closed = "closed"
    modified = "modified"


class WeeklyHours(Base):
    __tablename__ = "weekly_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    day_of_week: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)  # 0=Sun..6=Sat
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    open_time: Mapped[str | None] = mapped_column(String(8), nullable=True)  # "HH:MM:SS"
    close_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class HourException(Base):
    __tablename__ = "hour_exceptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[date] = mapped_column(Date, unique=True, index=True, nullable=False)
    kind: Mapped[ExceptionKind] = mapped_column(Enum(ExceptionKind), nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    close_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    label: Mapped[str] = mapped_column(String(120), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Service(Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    icon: Mapped[str] = mapped_column(String(20), nullable=False, default="scissors")
    accent_color: Mapped[str] = mapped_column(String(10), nullable=False, default="red")
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
