from __future__ import annotations

import asyncio
import logging
from datetime import date
from functools import partial
from typing import Awaitable, Callable

import httpx

from .config import Config
from .models import AnchorSet, FetchError, FetchState, Location, Ready, TimeOfDay

ALADHAN_BASE_URL = "https://api.aladhan.com/v1"
REQUEST_TIMEOUT_SEC = 10.0
SAHUR_FIELD = "Fajr"
IFTAR_FIELD = "Maghrib"
INVALID_DATA_MESSAGE = "Invalid data received from API"

logger = logging.getLogger(__name__)

AnchorProvider = Callable[[], Awaitable[FetchState]]


class AnchorApiError(RuntimeError):
    pass


class TransportError(AnchorApiError):
    pass


class MalformedResponseError(AnchorApiError):
    def __init__(self, message: str = INVALID_DATA_MESSAGE) -> None:
        super().__init__(message)


def format_request_date(day: date) -> str:
    return day.strftime("%d.%m.%Y")


def _timings_url(day: date) -> str:
    return f"{ALADHAN_BASE_URL}/timingsByCity/{format_request_date(day)}"


def _require_time_field(timings: dict[str, object], key: str) -> TimeOfDay:
    raw = timings.get(key)
    if not isinstance(raw, str):
        raise MalformedResponseError()
    try:
        return TimeOfDay.parse(raw)
    except ValueError as exc:
        raise MalformedResponseError() from exc


def parse_anchor_payload(payload: object) -> AnchorSet:
    if not isinstance(payload, dict):
        raise MalformedResponseError()
    data = payload.get("data")
    if not isinstance(data, dict):
        raise MalformedResponseError()
    timings = data.get("timings")
    if not isinstance(timings, dict):
        raise MalformedResponseError()

    return AnchorSet(
        sahur_start=_require_time_field(timings, SAHUR_FIELD),
        iftar_start=_require_time_field(timings, IFTAR_FIELD),
    )


async def _get_timings(
    day: date,
    params: dict[str, str],
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    # httpx timeouts apply per connect/read/write; the caller bounds the whole call.
    async with httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": "IftarNow CLI"},
        transport=transport,
    ) as client:
        return await client.get(_timings_url(day), params=params)


async def fetch_today_timings(
    location: Location,
    *,
    today: date | None = None,
    timeout: float = REQUEST_TIMEOUT_SEC,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AnchorSet:
    """Fetch today's sahur and iftar anchors, raising ``AnchorApiError`` on failure."""
    day = today or date.today()
    params = {
        "city": location.city,
        "country": location.country,
        "method": str(location.method),
    }

    try:
        response = await asyncio.wait_for(
            _get_timings(day, params, timeout, transport),
            timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise TransportError(f"Request timed out after {timeout:g} seconds") from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"Failed to fetch prayer times: {exc}") from exc

    if response.status_code >= 400:
        raise TransportError(f"Failed to fetch prayer times (HTTP {response.status_code})")

    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedResponseError() from exc

    return parse_anchor_payload(payload)


async def fetch_today_anchors(
    location: Location,
    *,
    today: date | None = None,
    timeout: float = REQUEST_TIMEOUT_SEC,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Ready | FetchError:
    try:
        anchors = await fetch_today_timings(
            location,
            today=today,
            timeout=timeout,
            transport=transport,
        )
    except AnchorApiError as exc:
        logger.warning("Prayer times fetch error for %s: %s", location.city, exc)
        return FetchError(str(exc))

    logger.debug(
        "Fetched anchors for %s: sahur=%s iftar=%s",
        location.city,
        anchors.sahur_start,
        anchors.iftar_start,
    )
    return Ready(anchors)


def make_anchor_provider(
    config: Config,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AnchorProvider:
    return partial(
        fetch_today_anchors,
        config.location,
        timeout=config.request_timeout_sec,
        transport=transport,
    )
