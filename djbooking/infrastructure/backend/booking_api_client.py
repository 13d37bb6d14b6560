from __future__ import annotations

import logging
from typing import Any

import httpx

from djbooking.application.dto.backend_reply import BackendReply
from djbooking.application.exceptions import BackendContractError, BackendUpstreamError
from djbooking.application.ports.booking_backend import BookingBackendPort
from djbooking.core.config import settings


class BookingApiClient(BookingBackendPort):
    def __init__(
        self,
        booking_base_url: str | None = None,
        health_check_url: str | None = None,
        booking_endpoint_path: str | None = None,
        block_schedule_path: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base = (booking_base_url or settings.BOOKING_API_BASE_URL).rstrip("/")
        self._booking_endpoint = base + (booking_endpoint_path or settings.BOOKING_ENDPOINT_PATH)
        self._block_schedule_url = (health_check_url or settings.HEALTH_CHECK_URL).rstrip("/") + (
            block_schedule_path or settings.BLOCK_SCHEDULE_PATH
        )
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self._logger = logging.getLogger(__name__)

    async def check_slot_block(self, date: str, time: str) -> BackendReply:
        return await self._post(self._block_schedule_url, json={"date": date, "time": time})

    async def check_duplicate_booking(self, event_date: str, event_time: str, email: str) -> BackendReply:
        return await self._post(
            f"{self._booking_endpoint}/check-availability",
            json={"eventDate": event_date, "eventTime": event_time, "email": email},
        )

    async def create_booking(self, payload: dict[str, Any]) -> BackendReply:
        return await self._post(self._booking_endpoint, json=payload)

    async def create_gateway_order(self, unique_id: str, amount: int) -> BackendReply:
        return await self._post(
            f"{self._booking_endpoint}/{unique_id}/payment/order",
            params={"amount": amount},
        )

    async def verify_gateway_payment(self, payload: dict[str, Any]) -> BackendReply:
        return await self._post(f"{self._booking_endpoint}/payment/callback", json=payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> BackendReply:
        try:
            resp = await self._client.post(url, json=json, params=params)
        except httpx.HTTPError as e:
            self._logger.error("Booking backend unreachable", extra={"url": url, "error": str(e)})
            raise BackendUpstreamError(f"Booking backend unreachable: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            self._logger.error(
                "Booking backend returned an unreadable body",
                extra={"url": url, "status": resp.status_code, "body_length": len(resp.text)},
            )
            if resp.status_code >= 400:
                raise BackendUpstreamError(f"Booking backend failed with status {resp.status_code}")
            raise BackendContractError("Booking backend returned a non-object JSON body")

        if resp.status_code >= 400:
            self._logger.warning(
                "Booking backend error",
                extra={"url": url, "status": resp.status_code, "reason": body.get("message")},
            )
        return BackendReply(status_code=resp.status_code, body=body)
