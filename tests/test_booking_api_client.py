"""
Tests for the httpx booking backend client.
"""

from __future__ import annotations

import json

import httpx
import pytest

from djbooking.application.exceptions import BackendContractError, BackendUpstreamError
from djbooking.infrastructure.backend.booking_api_client import BookingApiClient


def _client(handler) -> BookingApiClient:
    return BookingApiClient(
        booking_base_url="http://bookings.test/",
        health_check_url="http://schedule.test",
        booking_endpoint_path="/api/public/bookings",
        block_schedule_path="/api/public/blockSchedule/check-availability",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_requests_hit_expected_urls():
    seen: list[tuple[str, str, dict | None]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        seen.append((request.method, str(request.url), body))
        return httpx.Response(200, json={"status": "ok", "uniqueId": "BK100001"})

    client = _client(handler)
    await client.check_slot_block(date="10-24-2026", time="10:00 AM")
    await client.check_duplicate_booking(event_date="10-24-2026", event_time="10:00 AM", email="a@b.co")
    await client.create_booking({"clientName": "Sarah"})
    await client.create_gateway_order("BK100001", 350)
    await client.verify_gateway_payment({"razorpay_order_id": "order_1"})
    await client.aclose()

    assert seen == [
        (
            "POST",
            "http://schedule.test/api/public/blockSchedule/check-availability",
            {"date": "10-24-2026", "time": "10:00 AM"},
        ),
        (
            "POST",
            "http://bookings.test/api/public/bookings/check-availability",
            {"eventDate": "10-24-2026", "eventTime": "10:00 AM", "email": "a@b.co"},
        ),
        ("POST", "http://bookings.test/api/public/bookings", {"clientName": "Sarah"}),
        ("POST", "http://bookings.test/api/public/bookings/BK100001/payment/order?amount=350", None),
        ("POST", "http://bookings.test/api/public/bookings/payment/callback", {"razorpay_order_id": "order_1"}),
    ]


@pytest.mark.asyncio
async def test_error_status_with_json_body_is_returned():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"message": "Slot taken"})

    reply = await _client(handler).create_booking({})

    assert reply.status_code == 409
    assert reply.ok is False
    assert reply.message == "Slot taken"


@pytest.mark.asyncio
async def test_error_status_in_body_marks_reply_not_ok():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "error", "message": "Blocked"})

    reply = await _client(handler).check_slot_block(date="10-24-2026", time="10:00 AM")

    assert reply.ok is False
    assert reply.message == "Blocked"


@pytest.mark.asyncio
async def test_network_error_becomes_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUpstreamError):
        await _client(handler).create_booking({})


@pytest.mark.asyncio
async def test_unreadable_server_error_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(BackendUpstreamError):
        await _client(handler).create_booking({})


@pytest.mark.asyncio
async def test_non_object_success_body_is_contract_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    with pytest.raises(BackendContractError):
        await _client(handler).create_booking({})


@pytest.mark.asyncio
async def test_aclose_closes_http_client():
    client = _client(lambda request: httpx.Response(200, json={}))

    await client.aclose()

    assert client._client.is_closed
