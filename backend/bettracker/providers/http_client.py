"""
backend/bettracker/providers/http_client.py

Purpose:
    httpx.AsyncClient wrapper used by the wager API client: bounded retries
    with exponential backoff on transient failures, and a circuit breaker
    that stops calling a remote that keeps failing.

Dependencies:
    - httpx
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger("bettracker.http_client")

# Worth another attempt; every other status is final.
TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})
_TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


class CircuitOpenError(httpx.TransportError):
    """Raised instead of calling a remote whose circuit is open."""


@dataclass
class RetryPolicy:
    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 30.0

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def delay(self, attempt: int, response: Optional[httpx.Response] = None) -> float:
        """Seconds to wait after a failed `attempt` (0-based).

        A Retry-After header from the server wins over the exponential
        schedule; both are capped at max_delay.
        """
        hinted = _retry_after(response) if response is not None else None
        wait = hinted if hinted is not None else self.base_delay * (2 ** attempt)
        return min(wait, self.max_delay)


class CircuitBreaker:
    """Opens after `threshold` consecutive failed requests.

    While open, requests are refused until `cooldown` seconds have passed
    since the last failure; the next request is then let through as a probe.
    """

    def __init__(self, threshold: int = 3, cooldown: float = 60.0):
        self.threshold = threshold
        self.cooldown = cooldown
        self.failures = 0
        self._opened_at: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self._opened_at is not None

    def allow(self) -> bool:
        if self._opened_at is None:
            return True
        return time.monotonic() - self._opened_at >= self.cooldown

    def success(self) -> None:
        self.failures = 0
        self._opened_at = None

    def failure(self) -> None:
        self.failures += 1
        if self.failures >= self.threshold:
            if self._opened_at is None:
                logger.warning("Circuit opened after %d failed requests", self.failures)
            self._opened_at = time.monotonic()


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def _path_only(url: str) -> str:
    """URL without query string, for logs."""
    return str(url).split("?", 1)[0]


class ResilientClient:
    """Async HTTP client with retry/backoff and a circuit breaker.

    4xx responses other than 429 are returned on the first attempt.
    After the last attempt the final transient response is returned to the
    caller; a transient network error is re-raised.
    """

    def __init__(
        self,
        name: str,
        base_url: str = "",
        timeout: float = 15.0,
        max_retries: int = 2,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.name = name
        self.retry = RetryPolicy(max_retries=max_retries, base_delay=base_delay, max_delay=max_delay)
        self.circuit = CircuitBreaker()
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport, headers=headers,
        )

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        target = f"{method} {_path_only(url)}"
        if not self.circuit.allow():
            raise CircuitOpenError(f"[{self.name}] circuit open, not sending {target}")

        response: Optional[httpx.Response] = None
        for attempt in range(self.retry.attempts):
            is_last = attempt == self.retry.attempts - 1
            try:
                response = await self._client.request(method, url, **kwargs)
            except _TRANSIENT_ERRORS as exc:
                logger.warning(
                    "[%s] %s failed (%d/%d): %s",
                    self.name, target, attempt + 1, self.retry.attempts, exc,
                )
                if is_last:
                    self.circuit.failure()
                    raise
                await asyncio.sleep(self.retry.delay(attempt))
                continue

            if response.status_code not in TRANSIENT_STATUSES:
                self.circuit.success()
                return response

            logger.warning(
                "[%s] %s -> %d (%d/%d)",
                self.name, target, response.status_code, attempt + 1, self.retry.attempts,
            )
            if not is_last:
                await asyncio.sleep(self.retry.delay(attempt, response))

        self.circuit.failure()
        logger.error("[%s] %s gave up after %d attempts", self.name, target, self.retry.attempts)
        return response  # type: ignore[return-value]

    async def aclose(self) -> None:
        await self._client.aclose()
