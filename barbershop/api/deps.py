# barbershop/api/deps.py

# Shared FastAPI dependencies.
# get_sales_engine → SalesEngine over the Square client built at startup (503 when Square is not configured).
# require_admin → bearer-token gate for the admin routes (503 when no token is configured, 401 on mismatch).

import secrets

from fastapi import Header, HTTPException, Request

from barbershop.config import settings
from barbershop.services.sales import SalesEngine


def get_sales_engine(request: Request) -> SalesEngine:
    client = getattr(request.app.state, "square", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Square is not configured")
    return SalesEngine(client, settings.BUSINESS_TIMEZONE)


def require_admin(authorization: str | None = Header(default=None)) -> None:
    expected = settings.ADMIN_API_TOKEN
    if not expected:
        raise HTTPException(status_code=503, detail="Admin is not configured")
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip().encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Not authorized")
