"""
backend/tests/test_http_client.py

Purpose:
    Backoff schedule, Retry-After handling and circuit breaker of the
    resilient HTTP client.
"""

from __future__ import annotations

import httpx
import pytest

from bettracker.providers import http_client
from bettracker.providers.http_client import CircuitBreaker, CircuitOpenError, ResilientClient, RetryPolicy


def test_backoff_doubles_and_is_capped():
    policy = RetryPolicy(max_retries=2, base_delay=1.0, max_delay=30.0)

    assert [policy.delay(n) for n in range(6)] == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0]
    assert policy.attempts == 3


def test_retry_after_header_wins_but_is_capped():
    policy = RetryPolicy(base_delay=1.0, max_delay=30.0)

    assert policy.delay(0, httpx.Response(429, headers={"Retry-After": "7"})) == 7.0
    assert policy.delay(0, httpx.Response(429, headers={"Retry-After": "120"})) == 30.0
    assert policy.delay(1, httpx.Response(429, headers={"Retry-After": "soon"})) == 2.0


def test_circuit_breaker_opens_and_half_opens(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(http_client.time, "monotonic", lambda: now[0])
    breaker = CircuitBreaker(threshold=2, cooldown=60.0)

    breaker.failure()
    assert breaker.allow() is True
    breaker.failure()
    assert breaker.is_open is True
    assert breaker.allow() is False

    now[0] += 61
    assert breaker.allow() is True
    breaker.success()
    assert breaker.is_open is False
    assert breaker.failures == 0


@pytest.mark.asyncio
async def test_open_circuit_refuses_requests():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    client = ResilientClient(
        "test", base_url="http://remote.test", base_delay=0.0, max_retries=0,
        transport=httpx.MockTransport(handler),
    )
    for _ in range(3):
        assert (await client.request("GET", "/x")).status_code == 502

    with pytest.raises(CircuitOpenError):
        await client.request("GET", "/x")
    assert len(calls) == 3
    await client.aclose()


@pytest.mark.asyncio
async def test_sleeps_between_attempts_follow_policy(monkeypatch):
    slept: list[float] = []

    async def _fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr(http_client.asyncio, "sleep", _fake_sleep)
    client = ResilientClient(
        "test", base_url="http://remote.test", max_retries=2,
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
    )

    response = await client.request("GET", "/x")

    assert response.status_code == 503
    assert slept == [1.0, 2.0]


@pytest.mark.asyncio
async def test_dropped_connection_mid_response_is_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadError("connection reset by peer", request=request)
        return httpx.Response(200, json={"bets": []})

    client = ResilientClient(
        "test", base_url="http://remote.test", base_delay=0.0,
        transport=httpx.MockTransport(handler),
    )

    response = await client.request("GET", "/x")
    await client.aclose()

    assert response.status_code == 200
    assert len(calls) == 2
