# barbershop/main.py

# FastAPI application entrypoint for the barbershop site backend.
# Includes health, public, admin and report routers, and sets up database tables on startup.
# Builds the single Square client on startup (None when unconfigured) and closes it on shutdown.
# Root endpoint shows available API routes for quick reference.

import logging

from fastapi import FastAPI
from barbershop.api.health import router as health_router
from barbershop.api.public import router as public_router
from barbershop.api.admin import router as admin_router
from barbershop.api.reports import router as reports_router
from barbershop.config import settings
from barbershop.db import Base, engine
from barbershop.services.square import SquareClient
import barbershop.models  # important: registers tables

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Barbershop Site", version="0.1.0")
app.include_router(health_router, tags=["health"])
app.include_router(public_router, tags=["public"])
app.include_router(admin_router, tags=["admin"])
app.include_router(reports_router, tags=["reports"])
app.state.square = None

@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.square = SquareClient.from_settings(settings)
    if app.state.square is None:
        logger.warning("SQUARE_ACCESS_TOKEN not set; sales reports are disabled")

@app.on_event("shutdown")
async def on_shutdown():
    if app.state.square is not None:
        await app.state.square.aclose()
        app.state.square = None

@app.get("/")
async def root():
    return {
        "status": "ok",
        "see": ["/healthz", "/hours", "/services", "/admin/...", "/reports/summary",
                "/reports/customers", "/reports/calendar?year=&month=", "/reports/hourly?day="],
    }
