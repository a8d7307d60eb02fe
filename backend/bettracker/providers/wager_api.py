"""
backend/bettracker/providers/wager_api.py

Purpose:
    Async client for the wager CRUD API (/api/bets). Converts between the
    API's document format (upper-case enums, ISO datetimes) and Wager models,
    and maps error responses to WagerApiError / PlanLimitError.

Dependencies:
    - httpx (via bettracker.providers.http_client)
    - bettracker.config
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import httpx

from bettracker.config import settings
from bettracker.errors import PlanLimitError, WagerApiError
from bettracker.models.wager import Wager, WagerCreate, WagerUpdate
from bettracker.providers.base import WagerRemote
from bettracker.providers.http_client import ResilientClient

logger = logging.getLogger("bettracker.wager_api")

_BETS_PATH = "/api/bets"
_PAGE_SIZE = 100


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return f"Wager API error: {resp.status_code}"


@contextmanager
def _malformed_guard(resp: httpx.Response) -> Iterator[None]:
    """Turn an unreadable success body into WagerApiError."""
    try:
        yield
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.error(
            "Malformed wager API response (%d) from %s: %s",
            resp.status_code, resp.request.url.path, exc,
        )
        raise WagerApiError("Malformed wager API response.", status_code=resp.status_code) from exc


class WagerApiClient(WagerRemote):
    """WagerRemote backed by the HTTP CRUD endpoints.

    The API is per user: pass the session Cookie (or Authorization) header
    through `headers`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self._client = ResilientClient(
            "wager_api",
            base_url=base_url or settings.WAGER_API_BASE_URL,
            timeout=settings.WAGER_API_TIMEOUT_SECONDS,
            max_retries=settings.WAGER_API_MAX_RETRIES,
            base_delay=settings.WAGER_API_RETRY_BASE_DELAY,
            max_delay=settings.WAGER_API_RETRY_MAX_DELAY,
            transport=transport,
            headers=headers,
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Wager API unreachable on %s %s: %s", method, path, exc)
            raise WagerApiError("Wager API unreachable.") from exc

        if resp.is_success:
            return resp

        message = _error_message(resp)
        if resp.status_code == 403 and "free plan limit" in message.lower():
            raise PlanLimitError(message)
        logger.warning("Wager API %s %s -> %d: %s", method, path, resp.status_code, message)
        raise WagerApiError(message, status_code=resp.status_code)

    async def get_wagers(self) -> list[Wager]:
        """Fetch every page of the user's wagers."""
        wagers: list[Wager] = []
        page = 1
        while True:
            resp = await self._send("GET", _BETS_PATH, params={"page": page, "limit": _PAGE_SIZE})
            with _malformed_guard(resp):
                data = resp.json()
                wagers.extend(Wager.from_api(doc) for doc in data.get("bets", []))
                pages = int((data.get("pagination") or {}).get("pages") or 1)
            if page >= pages:
                break
            page += 1
        logger.debug("Fetched %d wagers in %d page(s)", len(wagers), page)
        return wagers

    async def create_wager(self, payload: WagerCreate) -> Wager:
        resp = await self._send("POST", _BETS_PATH, json=payload.to_api())
        with _malformed_guard(resp):
            return Wager.from_api(resp.json())

    async def update_wager(self, wager_id: str, update: WagerUpdate) -> Wager:
        resp = await self._send("PUT", f"{_BETS_PATH}/{wager_id}", json=update.to_api())
        with _malformed_guard(resp):
            return Wager.from_api(resp.json())

    async def delete_wager(self, wager_id: str) -> None:
        await self._send("DELETE", f"{_BETS_PATH}/{wager_id}")

    async def aclose(self) -> None:
        await self._client.aclose()
