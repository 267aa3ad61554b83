# barbershop/api/health.py

# Health check endpoint.
# /healthz → verifies DB connectivity by running "SELECT 1" and reports whether Square is configured.

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from barbershop.db import get_session

router = APIRouter()

@router.get("/healthz")
async def healthz(request: Request, session: AsyncSession = Depends(get_session)):
    await session.execute(text("SELECT 1"))
    return {"ok": True, "square": getattr(request.app.state, "square", None) is not None}
