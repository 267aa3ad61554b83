# Shared fixtures: in-memory async SQLite store, a fake Square client, and an API client.
# The fake client serves canned payments filtered to the requested [begin, end) window;
# fail_windows lists local start dates whose fetch fails.

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from barbershop.config import settings
from barbershop.db import Base, get_session
from barbershop.main import app
from barbershop.services.square import Customer, Payment, SquareError

NY = ZoneInfo("America/New_York")


def make_payment(ts: datetime, total: int, tip: int = 0, status: str = "COMPLETED",
                 customer_id: str | None = None, pid: str | None = None) -> Payment:
    return Payment(
        id=pid or f"p-{ts.isoformat()}-{total}",
        status=status,
        total_cents=total,
        tip_cents=tip,
        created_at=ts,
        customer_id=customer_id,
    )


class FakeSquare:
    def __init__(self, payments=(), customers=None, fail_payments=False, fail_customers=(), fail_windows=()):
        self.payments = list(payments)
        self.customers = customers or {}
        self.fail_payments = fail_payments
        self.fail_customers = set(fail_customers)
        self.fail_windows = set(fail_windows)
        self.calls = []

    async def list_payments(self, begin, end):
        self.calls.append((begin, end))
        if self.fail_payments or begin.date() in self.fail_windows:
            raise SquareError("payments down", 503)
        return [p for p in self.payments if begin <= p.created_at < end]

    async def retrieve_customer(self, customer_id):
        if customer_id in self.fail_customers:
            raise SquareError("customer lookup failed", 500)
        return self.customers.get(customer_id)


@pytest.fixture
def payment():
    return make_payment


@pytest.fixture
def square():
    return FakeSquare


@pytest.fixture
def customer():
    return Customer


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine):
    factory = async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)
    async with factory() as s:
        yield s


@pytest_asyncio.fixture
async def api(db_engine, monkeypatch):
    factory = async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)

    async def override_get_session():
        async with factory() as s:
            yield s

    app.dependency_overrides[get_session] = override_get_session
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", "test-token")
    monkeypatch.setattr(app.state, "square", None)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
