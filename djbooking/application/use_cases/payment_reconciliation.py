from __future__ import annotations

import logging
from typing import Any

from djbooking.application.dto.backend_reply import BackendReply
from djbooking.application.exceptions import InvalidProofFormat, PaymentRejected
from djbooking.application.ports.booking_backend import BookingBackendPort
from djbooking.application.utils.slot_policy import format_gate_date, to_minor_units
from djbooking.domain.entities.banner import Banner
from djbooking.domain.entities.booking_record import BookingStatus, BookingRecord
from djbooking.domain.entities.gateway_checkout import GatewayCheckout
from djbooking.domain.entities.proof import GatewayProof, ManualProof
from djbooking.domain.entities.wizard_state import Checkout

TRANSACTION_ID_LENGTH = 17

BOOKING_FAILED_FALLBACK = "Failed to create booking"
ORDER_FAILED_FALLBACK = "Failed to create payment order"
VERIFICATION_FAILED_FALLBACK = "Payment verification failed"
KEEP_BOOKING_ID_SUFFIX = ". Please keep a note of your booking Id!!"
PAYMENT_CANCELLED = "Payment cancelled"


def validate_transaction_id(transaction_id: str | None) -> ManualProof:
    if not transaction_id or len(transaction_id) != TRANSACTION_ID_LENGTH:
        raise InvalidProofFormat(f"Please enter a valid {TRANSACTION_ID_LENGTH}-character transaction ID")
    return ManualProof(transaction_id=transaction_id)


def validate_gateway_proof(proof: GatewayProof) -> GatewayProof:
    missing = [name for name in ("order_id", "payment_id", "signature") if not getattr(proof, name)]
    if missing:
        raise InvalidProofFormat(f"Gateway callback is missing: {', '.join(missing)}")
    return proof


def build_booking_payload(checkout: Checkout, phone_prefix: str = "+1") -> dict[str, Any]:
    client = checkout.client
    return {
        "clientName": client.name,
        "email": client.email,
        "phone": f"{phone_prefix}{client.phone}" if client.phone else "",
        "eventType": checkout.event_type.value,
        "eventDate": format_gate_date(checkout.event_date),
        "eventTime": checkout.event_time,
        "street": client.street,
        "apt": client.apt,
        "city": client.city,
        "state": client.state,
        "message": client.message,
        "amount": checkout.price,
    }


class PaymentReconciliationUseCase:
    def __init__(
        self,
        backend: BookingBackendPort,
        phone_prefix: str = "+1",
        currency: str = "USD",
        gateway_key_id: str = "",
        merchant_name: str = "",
    ) -> None:
        self._backend = backend
        self._phone_prefix = phone_prefix
        self._currency = currency
        self._gateway_key_id = gateway_key_id
        self._merchant_name = merchant_name
        self._logger = logging.getLogger(__name__)

    async def submit_manual_payment(self, checkout: Checkout, proof: ManualProof) -> BookingRecord:
        """Create the booking with a manual transaction id attached. One request per call."""
        payload = build_booking_payload(checkout, self._phone_prefix)
        payload.update(
            {
                "paypalTransactionId": proof.transaction_id,
                "paymentMethod": "paypal",
                "status": BookingStatus.pending.value,
            }
        )
        reply = await self._backend.create_booking(payload)
        record = self._record_or_raise(reply, BOOKING_FAILED_FALLBACK)
        self._logger.info("Booking created", extra={"unique_id": record.unique_id, "status": reply.status_code})
        return record

    async def create_pending_booking(self, checkout: Checkout) -> str:
        """Create the PENDING booking a gateway order is attached to and return its unique id."""
        payload = build_booking_payload(checkout, self._phone_prefix)
        payload.update({"paymentMethod": "gateway", "status": BookingStatus.pending.value})
        booking = await self._backend.create_booking(payload)
        if not booking.ok:
            raise PaymentRejected(
                (booking.message or BOOKING_FAILED_FALLBACK) + KEEP_BOOKING_ID_SUFFIX,
                status_code=booking.status_code,
            )

        unique_id = booking.body.get("uniqueId")
        if not unique_id:
            raise PaymentRejected(BOOKING_FAILED_FALLBACK, status_code=booking.status_code)
        self._logger.info("Pending booking created", extra={"unique_id": unique_id})
        return str(unique_id)

    async def open_gateway_order(self, checkout: Checkout, unique_id: str) -> GatewayCheckout:
        order = await self._backend.create_gateway_order(unique_id, checkout.price)
        if not order.ok:
            raise PaymentRejected(order.message or ORDER_FAILED_FALLBACK, status_code=order.status_code)

        order_id = order.body.get("gatewayOrderId") or order.body.get("razorpayOrderId")
        if not order_id:
            raise PaymentRejected(ORDER_FAILED_FALLBACK, status_code=order.status_code)

        client = checkout.client
        self._logger.info("Gateway order created", extra={"unique_id": unique_id})
        return GatewayCheckout(
            unique_id=unique_id,
            order_id=str(order_id),
            # TODO: confirm with the backend that order amounts are whole currency units before multiplying
            amount_minor=to_minor_units(order.body.get("amount", checkout.price)),
            currency=self._currency,
            key_id=self._gateway_key_id,
            merchant_name=self._merchant_name,
            description=f"Booking for {checkout.event_type.value}",
            prefill={"name": client.name, "email": client.email, "contact": client.phone},
            notes={
                "address": f"{client.street}, {client.city}, {client.state}",
                "booking_type": checkout.event_type.value,
            },
        )

    async def complete_gateway_payment(self, proof: GatewayProof) -> BookingRecord:
        validate_gateway_proof(proof)
        reply = await self._backend.verify_gateway_payment(
            {
                "razorpay_order_id": proof.order_id,
                "razorpay_payment_id": proof.payment_id,
                "razorpay_signature": proof.signature,
                "paymentType": proof.payment_type.value,
            }
        )
        record = self._record_or_raise(reply, VERIFICATION_FAILED_FALLBACK)
        self._logger.info("Gateway payment verified", extra={"unique_id": record.unique_id})
        return record

    def dismiss_gateway_checkout(self) -> Banner:
        self._logger.info("Gateway checkout dismissed")
        return Banner(level="error", message=PAYMENT_CANCELLED)

    def _record_or_raise(self, reply: BackendReply, fallback: str) -> BookingRecord:
        if not reply.ok:
            self._logger.warning(
                "Backend rejected payment",
                extra={"status": reply.status_code, "reason": reply.message},
            )
            raise PaymentRejected(reply.message or fallback, status_code=reply.status_code)
        return BookingRecord.from_response(reply.body)
