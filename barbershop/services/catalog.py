# barbershop/services/catalog.py

# Service price list shown on the public page and edited from the admin panel.
# Public reads fall back to the built-in price list when the store is empty or unreachable.

from __future__ import annotations
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.models import Service
from barbershop.schemas import ServiceIn, ServiceOut

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: list[ServiceOut] = [
    ServiceOut(
        name="Haircut",
        description="Classic haircut tailored to your style. Includes consultation, cut, and styling.",
        price=Decimal("10.00"), icon="scissors", accent_color="red", display_order=1, is_active=True,
    ),
    ServiceOut(
        name="Beard Trim",
        description="Professional beard shaping and trimming. Keep your facial hair looking sharp.",
        price=Decimal("8.00"), icon="user", accent_color="blue", display_order=2, is_active=True,
    ),
    ServiceOut(
        name="Senior Haircut",
        description="Quality haircut for our valued senior customers (65+). Same great service.",
        price=Decimal("9.00"), icon="userCheck", accent_color="red", display_order=3, is_active=True,
    ),
]


async def get_active_services(session: AsyncSession) -> list:
    try:
        rows = (await session.execute(
            select(Service).where(Service.is_active.is_(True)).order_by(Service.display_order)
        )).scalars().all()
    except (SQLAlchemyError, OSError) as e:
        logger.warning("services unavailable, using defaults: %s", e)
        await session.rollback()
        return list(DEFAULT_SERVICES)
    return list(rows) or list(DEFAULT_SERVICES)


async def list_services(session: AsyncSession) -> list[Service]:
    rows = await session.execute(select(Service).order_by(Service.display_order, Service.id))
    return list(rows.scalars().all())


async def create_service(session: AsyncSession, data: ServiceIn) -> Service:
    svc = Service(**data.model_dump())
    session.add(svc)
    await session.commit()
    logger.info("service %r added at %s", svc.name, svc.price)
    return svc


async def update_service(session: AsyncSession, service_id: int, data: ServiceIn) -> Service | None:
    svc = await session.get(Service, service_id)
    if svc is None:
        return None
    for field, value in data.model_dump().items():
        setattr(svc, field, value)
    await session.commit()
    return svc


async def delete_service(session: AsyncSession, service_id: int) -> bool:
    svc = await session.get(Service, service_id)
    if svc is None:
        return False
    await session.delete(svc)
    await session.commit()
    return True
