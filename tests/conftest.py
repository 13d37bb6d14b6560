from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta
from typing import Any

import pytest

from djbooking.application.dto.backend_reply import BackendReply
from djbooking.application.exceptions import BackendUpstreamError
from djbooking.application.ports.booking_backend import BookingBackendPort
from djbooking.application.use_cases import wizard
from djbooking.domain.entities.wizard_state import Checkout

OK = BackendReply(status_code=200, body={"status": "ok"})


class RecordingBackend(BookingBackendPort):
    """Scripted backend: each method returns its configured reply (or raises it) and records the call."""

    def __init__(self, **replies: Any) -> None:
        self.replies: dict[str, Any] = {
            "check_slot_block": OK,
            "check_duplicate_booking": OK,
            "create_booking": None,
            "create_gateway_order": BackendReply(
                status_code=200, body={"amount": 350, "gatewayOrderId": "order_1"}
            ),
            "verify_gateway_payment": None,
        }
        self.replies.update(replies)
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.delay: float = 0.0

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def last(self, name: str) -> dict[str, Any]:
        return [args for call, args in self.calls if call == name][-1]

    async def _reply(self, name: str, **args: Any) -> BackendReply:
        self.calls.append((name, args))
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies[name]
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            body = dict(args.get("payload") or {})
            body.setdefault("uniqueId", "BK100001")
            body.setdefault("status", "PENDING")
            body.setdefault("createdAt", "2026-10-19T12:00:00Z")
            return BackendReply(status_code=201, body=body)
        return reply

    async def check_slot_block(self, date: str, time: str) -> BackendReply:
        return await self._reply("check_slot_block", date=date, time=time)

    async def check_duplicate_booking(self, event_date: str, event_time: str, email: str) -> BackendReply:
        return await self._reply("check_duplicate_booking", event_date=event_date, event_time=event_time, email=email)

    async def create_booking(self, payload: dict[str, Any]) -> BackendReply:
        return await self._reply("create_booking", payload=payload)

    async def create_gateway_order(self, unique_id: str, amount: int) -> BackendReply:
        return await self._reply("create_gateway_order", unique_id=unique_id, amount=amount)

    async def verify_gateway_payment(self, payload: dict[str, Any]) -> BackendReply:
        return await self._reply("verify_gateway_payment", payload=payload)


def error_reply(message: str | None = None, status_code: int = 200) -> BackendReply:
    body: dict[str, Any] = {"status": "error"}
    if message:
        body["message"] = message
    return BackendReply(status_code=status_code, body=body)


def upstream_error() -> BackendUpstreamError:
    return BackendUpstreamError("Booking backend unreachable: connection refused")


def next_weekday(start: date, weekday: int) -> date:
    """Next date strictly after `start` falling on `weekday` (Mon=0)."""
    days = (weekday - start.weekday()) % 7 or 7
    return start + timedelta(days=days)


TODAY = date(2026, 10, 19)  # a Monday
NOW = datetime(2026, 10, 19, 11, 30)
NEXT_SATURDAY = next_weekday(TODAY, 5)

CLIENT = {
    "name": "Sarah Johnson",
    "email": "sarah.j@example.com",
    "phone": "5557890123",
    "street": "123 Melody Lane",
    "apt": "4B",
    "city": "Brooklyn",
    "state": "NY",
    "message": "Outdoor party",
}


def make_checkout(event_type: str = "Birthday", event_time: str = "10:00 AM", **client: str) -> Checkout:
    state = wizard.pick_date(wizard.start(), NEXT_SATURDAY, today=TODAY)
    state = wizard.pick_time(state, event_time, NOW)
    state = wizard.update_details(state, event_type=event_type, **{**CLIENT, **client})
    result = wizard.submit_details(state)
    assert isinstance(result, Checkout)
    return result


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def checkout() -> Checkout:
    return make_checkout()
