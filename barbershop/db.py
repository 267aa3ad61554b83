# Database setup with SQLAlchemy async engine and session factory.
# Works against local SQLite (aiosqlite) or the hosted Postgres (asyncpg) via DATABASE_URL.
# Hosted connections get pre-ping so a dropped pooled connection reads as a normal store error.
# get_session is the FastAPI dependency handing out one AsyncSession per request.


from typing import AsyncIterator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from barbershop.config import settings

Base = declarative_base()


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session
