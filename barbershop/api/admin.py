# barbershop/api/admin.py

# Admin panel endpoints (bearer token required).
# /admin/hours → read / save the whole week (all 7 days upserted together).
# /admin/exceptions → list upcoming, create, update, delete date overrides.
# /admin/services → edit the public price list.

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.api.deps import require_admin
from barbershop.config import settings
from barbershop.db import get_session
from barbershop.schemas import (
    HourExceptionIn, HourExceptionOut, ServiceIn, ServiceOut, WeeklyHoursOut, WeeklyScheduleIn,
)
from barbershop.services import catalog, hours

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.get("/hours", response_model=list[WeeklyHoursOut])
async def get_hours(session: AsyncSession = Depends(get_session)):
    return await hours.admin_weekly_hours(session)


@router.put("/hours", response_model=list[WeeklyHoursOut])
async def put_hours(body: WeeklyScheduleIn, session: AsyncSession = Depends(get_session)):
    return await hours.save_weekly_hours(session, body)


@router.get("/exceptions", response_model=list[HourExceptionOut])
async def get_exceptions(session: AsyncSession = Depends(get_session)):
    today = hours.business_today(settings.BUSINESS_TIMEZONE)
    return await hours.admin_exceptions(session, today, settings.EXCEPTION_LOOKAHEAD_DAYS)


@router.post("/exceptions", response_model=HourExceptionOut, status_code=201)
async def post_exception(body: HourExceptionIn, session: AsyncSession = Depends(get_session)):
    try:
        return await hours.create_exception(session, body)
    except hours.DuplicateExceptionDate as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/exceptions/{exception_id}", response_model=HourExceptionOut)
async def put_exception(exception_id: int, body: HourExceptionIn, session: AsyncSession = Depends(get_session)):
    try:
        exc = await hours.update_exception(session, exception_id, body)
    except hours.DuplicateExceptionDate as e:
        raise HTTPException(status_code=409, detail=str(e))
    if exc is None:
        raise HTTPException(status_code=404, detail="exception not found")
    return exc


@router.delete("/exceptions/{exception_id}", status_code=204)
async def remove_exception(exception_id: int, session: AsyncSession = Depends(get_session)):
    if not await hours.delete_exception(session, exception_id):
        raise HTTPException(status_code=404, detail="exception not found")
    return Response(status_code=204)


@router.get("/services", response_model=list[ServiceOut])
async def get_services(session: AsyncSession = Depends(get_session)):
    return await catalog.list_services(session)


@router.post("/services", response_model=ServiceOut, status_code=201)
async def post_service(body: ServiceIn, session: AsyncSession = Depends(get_session)):
    return await catalog.create_service(session, body)


@router.put("/services/{service_id}", response_model=ServiceOut)
async def put_service(service_id: int, body: ServiceIn, session: AsyncSession = Depends(get_session)):
    svc = await catalog.update_service(session, service_id, body)
    if svc is None:
        raise HTTPException(status_code=404, detail="service not found")
    return svc


@router.delete("/services/{service_id}", status_code=204)
async def remove_service(service_id: int, session: AsyncSession = Depends(get_session)):
    if not await catalog.delete_service(session, service_id):
        raise HTTPException(status_code=404, detail="service not found")
    return Response(status_code=204)
