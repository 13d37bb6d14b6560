from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone
from typing import Any

from djbooking.application.dto.backend_reply import BackendReply
from djbooking.application.ports.booking_backend import BookingBackendPort


def gateway_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, "sha256").hexdigest()


class MockBookingBackend(BookingBackendPort):
    """In-memory stand-in for the booking backend, used in dev and by the local harness."""

    def __init__(self, gateway_secret: str = "mock_gateway_secret") -> None:
        self._blocked: set[tuple[str, str]] = set()
        self._bookings: dict[str, dict[str, Any]] = {}
        self._orders: dict[str, dict[str, Any]] = {}
        self._gateway_secret = gateway_secret
        self._logger = logging.getLogger(__name__)
        self.calls: list[str] = []

    def block_slot(self, date: str, time: str) -> None:
        self._blocked.add((date, time))

    def get_booking(self, unique_id: str) -> dict[str, Any] | None:
        booking = self._bookings.get(unique_id)
        return dict(booking) if booking else None

    async def check_slot_block(self, date: str, time: str) -> BackendReply:
        self.calls.append("check_slot_block")
        if (date, time) in self._blocked:
            return BackendReply(status_code=200, body={"status": "error", "message": "The DJ is unavailable at this time"})
        return BackendReply(status_code=200, body={"status": "ok"})

    async def check_duplicate_booking(self, event_date: str, event_time: str, email: str) -> BackendReply:
        self.calls.append("check_duplicate_booking")
        for booking in self._bookings.values():
            if (
                booking["eventDate"] == event_date
                and booking["eventTime"] == event_time
                and booking["email"].lower() == email.lower()
                and booking["status"] != "CANCELLED"
            ):
                return BackendReply(
                    status_code=200,
                    body={"status": "error", "message": f"Booking already exists with id {booking['uniqueId']}"},
                )
        return BackendReply(status_code=200, body={"status": "ok"})

    async def create_booking(self, payload: dict[str, Any]) -> BackendReply:
        self.calls.append("create_booking")
        unique_id = f"BK{len(self._bookings) + 100001}"
        record = {
            **payload,
            "uniqueId": unique_id,
            "status": payload.get("status") or "PENDING",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self._bookings[unique_id] = record
        self._logger.info("Mock booking created", extra={"unique_id": unique_id})
        return BackendReply(status_code=201, body=dict(record))

    async def create_gateway_order(self, unique_id: str, amount: int) -> BackendReply:
        self.calls.append("create_gateway_order")
        if unique_id not in self._bookings:
            return BackendReply(status_code=404, body={"status": "error", "message": "Booking not found"})
        order_id = f"order_mock_{len(self._orders) + 1}"
        self._orders[order_id] = {"uniqueId": unique_id, "amount": amount}
        return BackendReply(status_code=200, body={"amount": amount, "gatewayOrderId": order_id})

    async def verify_gateway_payment(self, payload: dict[str, Any]) -> BackendReply:
        self.calls.append("verify_gateway_payment")
        order_id = payload.get("razorpay_order_id", "")
        payment_id = payload.get("razorpay_payment_id", "")
        order = self._orders.get(order_id)
        expected = gateway_signature(order_id, payment_id, self._gateway_secret)
        if order is None or not hmac.compare_digest(expected, payload.get("razorpay_signature", "")):
            return BackendReply(status_code=400, body={"status": "error", "message": "Invalid payment signature"})

        booking = self._bookings[order["uniqueId"]]
        booking.update(
            {
                "gatewayOrderId": order_id,
                "gatewayPaymentId": payment_id,
                "paymentType": payload.get("paymentType", "DEPOSIT"),
            }
        )
        return BackendReply(status_code=200, body=dict(booking))
