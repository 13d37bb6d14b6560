"""
Tests for the backend health monitor.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from djbooking.infrastructure.health.health_monitor import BackendStatus, HealthMonitor


def _monitor(handler, interval: float = 300.0) -> HealthMonitor:
    return HealthMonitor(
        "http://backend.test/health",
        interval_seconds=interval,
        transport=httpx.MockTransport(handler),
    )


def test_status_starts_as_checking():
    monitor = _monitor(lambda request: httpx.Response(200))
    assert monitor.status == BackendStatus.checking
    assert monitor.snapshot() == {"backendStatus": "checking", "lastChecked": None}


@pytest.mark.asyncio
async def test_ok_response_means_connected():
    monitor = _monitor(lambda request: httpx.Response(200, json={"status": "UP"}))

    status = await monitor.check_once()

    assert status == BackendStatus.connected
    assert monitor.last_checked is not None
    assert monitor.snapshot()["backendStatus"] == "connected"
    await monitor.stop()


@pytest.mark.asyncio
async def test_non_200_means_disconnected():
    monitor = _monitor(lambda request: httpx.Response(503))

    assert await monitor.check_once() == BackendStatus.disconnected
    await monitor.stop()


@pytest.mark.asyncio
async def test_network_error_means_disconnected():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    monitor = _monitor(handler)

    assert await monitor.check_once() == BackendStatus.disconnected
    await monitor.stop()


@pytest.mark.asyncio
async def test_background_polling_runs_until_stopped():
    hits: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hits.append(str(request.url))
        return httpx.Response(200)

    monitor = _monitor(handler, interval=0.01)
    monitor.start()
    await asyncio.sleep(0.05)
    await monitor.stop()
    count = len(hits)
    await asyncio.sleep(0.03)

    assert count >= 2
    assert len(hits) == count
    assert monitor.status == BackendStatus.connected
