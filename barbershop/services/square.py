# barbershop/services/square.py

# Thin async client for the Square REST API (payments + customers).
# One instance is built at startup from settings and injected where needed; nothing global.
# Follows list cursors until exhausted; retries transport errors, 429 and 5xx with exponential backoff.
# Unparseable payment records are skipped; exhausted retries surface as SquareError.

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

logger = logging.getLogger(__name__)

SQUARE_URLS = {
    "production": "https://connect.squareup.com",
    "sandbox": "https://connect.squareupsandbox.com",
}
PAGE_LIMIT = 100


class SquareError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Payment:
    id: str
    status: str
    total_cents: int
    tip_cents: int
    created_at: datetime
    customer_id: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Payment":
        total = data.get("total_money") or data.get("amount_money") or {}
        tip = data.get("tip_money") or {}
        return cls(
            id=str(data["id"]),
            status=str(data.get("status", "")),
            total_cents=int(total.get("amount", 0)),
            tip_cents=int(tip.get("amount", 0)),
            created_at=_parse_ts(data["created_at"]),
            customer_id=data.get("customer_id") or None,
        )


@dataclass(frozen=True)
class Customer:
    id: str
    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None
    phone: str | None = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.given_name, self.family_name) if p).strip()


class SquareClient:
    def __init__(
        self,
        access_token: str,
        environment: str = "production",
        *,
        location_id: str | None = None,
        api_version: str = "2024-12-18",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.location_id = location_id
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._http = httpx.AsyncClient(
            base_url=SQUARE_URLS.get(environment, SQUARE_URLS["production"]),
            headers={
                "Square-Version": api_version,
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> "SquareClient | None":
        if not settings.SQUARE_ACCESS_TOKEN:
            return None
        return cls(
            settings.SQUARE_ACCESS_TOKEN,
            settings.SQUARE_ENVIRONMENT,
            location_id=settings.SQUARE_LOCATION_ID,
            api_version=settings.SQUARE_API_VERSION,
            timeout=settings.SQUARE_TIMEOUT,
            max_retries=settings.SQUARE_MAX_RETRIES,
            retry_delay=settings.SQUARE_RETRY_DELAY,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        """GET with retry on transport errors, 429 and 5xx. Other statuses are returned as-is."""
        error: SquareError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = await self._http.get(path, params=params)
            except httpx.TransportError as e:
                error = SquareError(f"GET {path} failed: {e}")
            else:
                if resp.status_code != 429 and resp.status_code < 500:
                    return resp
                error = SquareError(f"GET {path} returned {resp.status_code}", resp.status_code)
            if attempt < self.max_retries:
                logger.warning("Square retry %d/%d: %s", attempt + 1, self.max_retries, error)
                await asyncio.sleep(self.retry_delay * (2 ** attempt))
        logger.error("Square request gave up: %s", error)
        raise error

    @staticmethod
    def _json(resp: httpx.Response, path: str) -> dict:
        if resp.status_code >= 400:
            raise SquareError(f"GET {path} returned {resp.status_code}: {resp.text[:200]}", resp.status_code)
        try:
            body = resp.json()
        except ValueError:
            raise SquareError(f"GET {path} returned invalid JSON", resp.status_code) from None
        return body if isinstance(body, dict) else {}

    async def list_payments(self, begin: datetime, end: datetime) -> list[Payment]:
        """All payments created in [begin, end), oldest first."""
        params = {
            "begin_time": _rfc3339(begin),
            "end_time": _rfc3339(end),
            "sort_order": "ASC",
            "limit": PAGE_LIMIT,
        }
        if self.location_id:
            params["location_id"] = self.location_id

        out: list[Payment] = []
        seen: set[str] = set()
        while True:
            body = self._json(await self._get("/v2/payments", params), "/v2/payments")
            for raw in body.get("payments") or []:
                try:
                    out.append(Payment.from_api(raw))
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    logger.warning("skipping malformed payment record: %r", e)
            cursor = body.get("cursor")
            if not cursor or cursor in seen:
                break
            seen.add(cursor)
            params["cursor"] = cursor
        return out

    async def retrieve_customer(self, customer_id: str) -> Customer | None:
        path = f"/v2/customers/{customer_id}"
        resp = await self._get(path)
        if resp.status_code == 404:
            return None
        data = self._json(resp, path).get("customer")
        if not data:
            return None
        return Customer(
            id=str(data.get("id", customer_id)),
            given_name=data.get("given_name"),
            family_name=data.get("family_name"),
            email=data.get("email_address"),
            phone=data.get("phone_number"),
        )
