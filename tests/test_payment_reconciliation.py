"""
Tests for manual and gateway payment reconciliation.
"""

from __future__ import annotations

import pytest

from conftest import RecordingBackend, error_reply, make_checkout, upstream_error
from djbooking.application.dto.backend_reply import BackendReply
from djbooking.application.exceptions import BackendUpstreamError, InvalidProofFormat, PaymentRejected
from djbooking.application.use_cases.payment_reconciliation import (
    KEEP_BOOKING_ID_SUFFIX,
    PAYMENT_CANCELLED,
    PaymentReconciliationUseCase,
    build_booking_payload,
    validate_gateway_proof,
    validate_transaction_id,
)
from djbooking.domain.entities.booking_record import BookingStatus
from djbooking.domain.entities.proof import GatewayPaymentType, GatewayProof

TRANSACTION_ID = "ABCDE12345FGHIJ6Z"


def _use_case(backend) -> PaymentReconciliationUseCase:
    return PaymentReconciliationUseCase(
        backend,
        phone_prefix="+1",
        currency="USD",
        gateway_key_id="rzp_test_key",
        merchant_name="DJ Jeff Jackson Jr",
    )


@pytest.mark.parametrize("value", ["ABCDE12345FGHIJ6", "ABCDE12345FGHIJ6ZZ", "", None])
def test_transaction_id_must_be_seventeen_characters(value):
    with pytest.raises(InvalidProofFormat):
        validate_transaction_id(value)


def test_valid_transaction_id_is_kept_verbatim():
    assert validate_transaction_id(TRANSACTION_ID).transaction_id == TRANSACTION_ID


def test_gateway_proof_requires_all_ids():
    with pytest.raises(InvalidProofFormat):
        validate_gateway_proof(GatewayProof(order_id="order_1", payment_id="", signature="sig"))


def test_payload_formats_date_and_phone(checkout):
    payload = build_booking_payload(checkout, "+1")

    assert payload["eventDate"] == "10-24-2026"
    assert payload["eventTime"] == "10:00 AM"
    assert payload["eventType"] == "Birthday"
    assert payload["phone"] == "+15557890123"
    assert payload["amount"] == 350
    assert payload["clientName"] == "Sarah Johnson"


def test_payload_leaves_missing_phone_empty():
    payload = build_booking_payload(make_checkout(phone=""), "+1")
    assert payload["phone"] == ""


@pytest.mark.asyncio
async def test_manual_payment_creates_one_pending_booking(backend, checkout):
    proof = validate_transaction_id(TRANSACTION_ID)

    record = await _use_case(backend).submit_manual_payment(checkout, proof)

    assert backend.count("create_booking") == 1
    sent = backend.last("create_booking")["payload"]
    assert sent["paypalTransactionId"] == TRANSACTION_ID
    assert sent["paymentMethod"] == "paypal"
    assert sent["status"] == "PENDING"
    assert sent["amount"] == 350
    assert record.unique_id == "BK100001"
    assert record.status == BookingStatus.pending
    assert record.get("createdAt") == "2026-10-19T12:00:00Z"


@pytest.mark.asyncio
async def test_record_is_the_server_response_not_the_draft(checkout):
    """Fields the server rewrites are shown as the server returned them."""
    body = {"uniqueId": "BK900001", "amount": 300, "status": "PENDING", "eventType": "Birthday"}
    backend = RecordingBackend(create_booking=BackendReply(status_code=201, body=body))

    record = await _use_case(backend).submit_manual_payment(checkout, validate_transaction_id(TRANSACTION_ID))

    assert record.to_dict() == body
    assert record.amount == 300


@pytest.mark.asyncio
async def test_rejected_booking_raises_with_server_message(checkout):
    backend = RecordingBackend(create_booking=error_reply("Invalid transaction", status_code=400))

    with pytest.raises(PaymentRejected) as exc:
        await _use_case(backend).submit_manual_payment(checkout, validate_transaction_id(TRANSACTION_ID))

    assert exc.value.message == "Invalid transaction"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_transport_error_propagates(checkout):
    backend = RecordingBackend(create_booking=upstream_error())

    with pytest.raises(BackendUpstreamError):
        await _use_case(backend).submit_manual_payment(checkout, validate_transaction_id(TRANSACTION_ID))


@pytest.mark.asyncio
async def test_gateway_checkout_creates_booking_then_order(backend, checkout):
    use_case = _use_case(backend)
    unique_id = await use_case.create_pending_booking(checkout)
    gateway = await use_case.open_gateway_order(checkout, unique_id)

    assert [name for name, _ in backend.calls] == ["create_booking", "create_gateway_order"]
    assert backend.last("create_booking")["payload"]["status"] == "PENDING"
    assert backend.last("create_gateway_order") == {"unique_id": "BK100001", "amount": 350}
    assert gateway.unique_id == "BK100001"
    assert gateway.order_id == "order_1"
    assert gateway.amount_minor == 35000
    assert gateway.currency == "USD"
    assert gateway.key_id == "rzp_test_key"
    assert gateway.prefill == {"name": "Sarah Johnson", "email": "sarah.j@example.com", "contact": "5557890123"}
    assert gateway.notes["booking_type"] == "Birthday"


@pytest.mark.asyncio
async def test_gateway_booking_failure_asks_to_keep_booking_id(checkout):
    backend = RecordingBackend(create_booking=error_reply("Slot just taken"))

    with pytest.raises(PaymentRejected) as exc:
        await _use_case(backend).create_pending_booking(checkout)

    assert exc.value.message == "Slot just taken" + KEEP_BOOKING_ID_SUFFIX
    assert backend.count("create_gateway_order") == 0


@pytest.mark.asyncio
async def test_gateway_order_failure(checkout):
    backend = RecordingBackend(create_gateway_order=error_reply("Order service down", status_code=503))

    with pytest.raises(PaymentRejected) as exc:
        await _use_case(backend).open_gateway_order(checkout, "BK100001")

    assert exc.value.message == "Order service down"
    assert backend.count("create_booking") == 0


@pytest.mark.asyncio
async def test_gateway_callback_posts_ids_and_payment_type(backend):
    proof = GatewayProof(
        order_id="order_1",
        payment_id="pay_1",
        signature="sig",
        payment_type=GatewayPaymentType.balance,
    )

    record = await _use_case(backend).complete_gateway_payment(proof)

    assert backend.last("verify_gateway_payment")["payload"] == {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": "sig",
        "paymentType": "BALANCE",
    }
    assert record.unique_id == "BK100001"


def test_dismissed_gateway_submits_nothing(backend):
    banner = _use_case(backend).dismiss_gateway_checkout()

    assert banner.message == PAYMENT_CANCELLED
    assert backend.calls == []
