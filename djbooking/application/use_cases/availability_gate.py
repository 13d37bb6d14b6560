from __future__ import annotations

import logging

from djbooking.application.exceptions import BackendContractError, BackendUpstreamError
from djbooking.application.ports.booking_backend import BookingBackendPort
from djbooking.application.utils.slot_policy import format_gate_date
from djbooking.domain.entities.availability import AvailabilityVerdict
from djbooking.domain.entities.wizard_state import Checkout

SLOT_BLOCKED_FALLBACK = "This time slot is not available. Please choose a different time."
DUPLICATE_FALLBACK = "A booking already exists for this date and time"
DUPLICATE_SUFFIX = ". Please check your email for existing booking details."
UNREACHABLE_MESSAGE = "We could not confirm availability right now. Please try again."


class AvailabilityGateUseCase:
    """Runs the two pre-payment checks in order: slot block, then duplicate booking."""

    def __init__(self, backend: BookingBackendPort) -> None:
        self._backend = backend
        self._logger = logging.getLogger(__name__)

    async def check(self, checkout: Checkout, check_duplicates: bool = True) -> AvailabilityVerdict:
        event_date = format_gate_date(checkout.event_date)
        event_time = checkout.event_time

        try:
            block = await self._backend.check_slot_block(date=event_date, time=event_time)
        except (BackendUpstreamError, BackendContractError) as e:
            self._logger.warning("Slot-block check failed", extra={"reason": str(e)})
            return AvailabilityVerdict.unreachable(UNREACHABLE_MESSAGE)

        if not block.ok:
            self._logger.info(
                "Slot blocked",
                extra={"status": block.status_code, "reason": block.message},
            )
            return AvailabilityVerdict.rejected(block.message or SLOT_BLOCKED_FALLBACK)

        if not check_duplicates:
            return AvailabilityVerdict.passed()

        try:
            duplicate = await self._backend.check_duplicate_booking(
                event_date=event_date,
                event_time=event_time,
                email=checkout.client.email,
            )
        except (BackendUpstreamError, BackendContractError) as e:
            self._logger.warning("Duplicate-booking check failed", extra={"reason": str(e)})
            return AvailabilityVerdict.unreachable(UNREACHABLE_MESSAGE)

        if not duplicate.ok:
            self._logger.info(
                "Duplicate booking",
                extra={"status": duplicate.status_code, "reason": duplicate.message},
            )
            return AvailabilityVerdict.rejected((duplicate.message or DUPLICATE_FALLBACK) + DUPLICATE_SUFFIX)

        return AvailabilityVerdict.passed()
