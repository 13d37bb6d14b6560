"""
Tests for the pre-payment availability gate.
"""

from __future__ import annotations

import pytest

from conftest import RecordingBackend, error_reply, make_checkout, upstream_error
from djbooking.application.exceptions import BackendContractError
from djbooking.application.use_cases.availability_gate import (
    DUPLICATE_FALLBACK,
    DUPLICATE_SUFFIX,
    SLOT_BLOCKED_FALLBACK,
    UNREACHABLE_MESSAGE,
    AvailabilityGateUseCase,
)
from djbooking.domain.entities.availability import VerdictKind


@pytest.mark.asyncio
async def test_both_checks_pass_in_order(backend, checkout):
    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.available is True
    assert verdict.kind == VerdictKind.ok
    assert [name for name, _ in backend.calls] == ["check_slot_block", "check_duplicate_booking"]
    assert backend.last("check_slot_block") == {"date": "10-24-2026", "time": "10:00 AM"}
    assert backend.last("check_duplicate_booking") == {
        "event_date": "10-24-2026",
        "event_time": "10:00 AM",
        "email": "sarah.j@example.com",
    }


@pytest.mark.asyncio
async def test_blocked_slot_skips_duplicate_check(checkout):
    """A blocked slot is reported with the server message and the second check is never issued."""
    backend = RecordingBackend(check_slot_block=error_reply("DJ is unavailable on this date"))

    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.available is False
    assert verdict.kind == VerdictKind.rejected
    assert verdict.reason == "DJ is unavailable on this date"
    assert verdict.scroll_to_top is True
    assert backend.count("check_slot_block") == 1
    assert backend.count("check_duplicate_booking") == 0


@pytest.mark.asyncio
async def test_blocked_slot_without_message_uses_fallback(checkout):
    backend = RecordingBackend(check_slot_block=error_reply(status_code=409))

    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.reason == SLOT_BLOCKED_FALLBACK


@pytest.mark.asyncio
async def test_duplicate_booking_message_is_suffixed(checkout):
    backend = RecordingBackend(check_duplicate_booking=error_reply("You already booked this slot"))

    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.kind == VerdictKind.rejected
    assert verdict.reason == "You already booked this slot" + DUPLICATE_SUFFIX


@pytest.mark.asyncio
async def test_duplicate_booking_without_message(checkout):
    backend = RecordingBackend(check_duplicate_booking=error_reply(status_code=400))

    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.reason == DUPLICATE_FALLBACK + DUPLICATE_SUFFIX


@pytest.mark.asyncio
async def test_unreachable_backend_fails_closed(checkout):
    """Transport failures never let the visitor through to payment."""
    backend = RecordingBackend(check_slot_block=upstream_error())

    verdict = await AvailabilityGateUseCase(backend).check(checkout)

    assert verdict.available is False
    assert verdict.kind == VerdictKind.transport
    assert verdict.reason == UNREACHABLE_MESSAGE
    assert backend.count("check_duplicate_booking") == 0


@pytest.mark.asyncio
async def test_unreadable_duplicate_reply_fails_closed():
    backend = RecordingBackend(check_duplicate_booking=BackendContractError("not json"))

    verdict = await AvailabilityGateUseCase(backend).check(make_checkout(event_type="Wedding"))

    assert verdict.available is False
    assert verdict.kind == VerdictKind.transport


@pytest.mark.asyncio
async def test_duplicate_check_can_be_skipped_for_a_held_booking(checkout):
    """Only the slot-block check runs when the caller already holds the booking for this slot."""
    backend = RecordingBackend(check_duplicate_booking=error_reply("Booking already exists"))

    verdict = await AvailabilityGateUseCase(backend).check(checkout, check_duplicates=False)

    assert verdict.available is True
    assert backend.count("check_slot_block") == 1
    assert backend.count("check_duplicate_booking") == 0
