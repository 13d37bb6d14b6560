"""
Backend reachability monitor.

Polls the health-check URL on a fixed interval and keeps the last known
status. The booking flow never reads this; it only reports the errors its
own calls produce.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum

import httpx


class BackendStatus(str, Enum):
    checking = "checking"
    connected = "connected"
    disconnected = "disconnected"


class HealthMonitor:
    def __init__(
        self,
        health_check_url: str,
        interval_seconds: float = 300.0,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = health_check_url
        self._interval = interval_seconds
        self._timeout = timeout
        self._transport = transport
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._task: asyncio.Task | None = None
        self._status = BackendStatus.checking
        self._reported: BackendStatus | None = None
        self._last_checked: datetime | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def status(self) -> BackendStatus:
        return self._status

    @property
    def last_checked(self) -> datetime | None:
        return self._last_checked

    def snapshot(self) -> dict[str, str | None]:
        return {
            "backendStatus": self._status.value,
            "lastChecked": self._last_checked.isoformat() if self._last_checked else None,
        }

    async def check_once(self) -> BackendStatus:
        self._set(BackendStatus.checking)
        try:
            resp = await self._client.get(self._url)
            status = BackendStatus.connected if resp.status_code == 200 else BackendStatus.disconnected
        except httpx.HTTPError as e:
            self._logger.warning("Health check failed", extra={"reason": str(e)})
            status = BackendStatus.disconnected
        self._set(status)
        return status

    def start(self) -> None:
        if self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
            self._logger.info("Health monitor started", extra={"interval": self._interval})

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self._client.aclose()
        self._logger.info("Health monitor stopped")

    async def _run(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self._interval)

    def _set(self, status: BackendStatus) -> None:
        if status != BackendStatus.checking and status != self._reported:
            self._logger.info("Backend status changed", extra={"status": status.value})
            self._reported = status
        self._status = status
        self._last_checked = datetime.now(timezone.utc)
