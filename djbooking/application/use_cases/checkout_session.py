from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from djbooking.application.exceptions import (
    BackendContractError,
    BackendUpstreamError,
    InvalidProofFormat,
    PaymentRejected,
    WizardBusy,
    WizardContractError,
)
from djbooking.application.use_cases import wizard
from djbooking.application.use_cases.availability_gate import AvailabilityGateUseCase
from djbooking.application.use_cases.payment_reconciliation import (
    PaymentReconciliationUseCase,
    validate_gateway_proof,
    validate_transaction_id,
)
from djbooking.domain.entities.availability import AvailabilityVerdict, VerdictKind
from djbooking.domain.entities.banner import Banner
from djbooking.domain.entities.booking_record import BookingRecord
from djbooking.domain.entities.gateway_checkout import GatewayCheckout
from djbooking.domain.entities.proof import GatewayPaymentType, GatewayProof
from djbooking.domain.entities.wizard_state import Checkout, WizardState

CONFIRMATION_ROUTE = "/confirmation"
UPSTREAM_FAILURE_MESSAGE = "Something went wrong while processing your booking. Please try again."


class OutcomeStatus(str, Enum):
    confirmed = "confirmed"
    gateway_ready = "gateway_ready"
    gate_rejected = "gate_rejected"
    gate_failed = "gate_failed"
    invalid_proof = "invalid_proof"
    payment_failed = "payment_failed"
    cancelled = "cancelled"
    ignored = "ignored"
    stale = "stale"


@dataclass(frozen=True)
class CheckoutOutcome:
    status: OutcomeStatus
    banner: Banner | None = None
    record: BookingRecord | None = None
    route: str | None = None
    gateway: GatewayCheckout | None = None
    verdict: AvailabilityVerdict | None = None


class CheckoutSession:
    """One visitor's pass through the wizard.

    Owns the step state, the busy flag and the request generation. Only one
    availability/payment operation runs at a time; a second pay request while
    busy is a no-op. Every operation remembers the generation it started under
    and drops its result if the session was restarted in the meantime.

    The gateway path creates a PENDING booking before the order. The session
    holds on to that booking for the checkout it was made for, so a retry after
    a dismissed or failed order reuses it instead of tripping the duplicate check.
    Once a booking is confirmed the wizard is closed until restart().
    """

    def __init__(
        self,
        gate: AvailabilityGateUseCase,
        reconciliation: PaymentReconciliationUseCase,
        session_id: str = "",
    ) -> None:
        self._gate = gate
        self._reconciliation = reconciliation
        self.session_id = session_id
        self._state: WizardState = wizard.start()
        self._busy = False
        self._generation = 0
        self._banner: Banner | None = None
        self._record: BookingRecord | None = None
        self._pending_gateway: GatewayCheckout | None = None
        self._gateway_hold: tuple[Checkout, str] | None = None
        self._logger = logging.getLogger(__name__)

    # ── read side ────────────────────────────────────────────

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def banner(self) -> Banner | None:
        return self._banner

    @property
    def record(self) -> BookingRecord | None:
        return self._record

    @property
    def pending_gateway(self) -> GatewayCheckout | None:
        return self._pending_gateway

    @property
    def gateway_booking_id(self) -> str | None:
        return self._gateway_hold[1] if self._gateway_hold else None

    # ── navigation ───────────────────────────────────────────

    def pick_date(self, event_date: date, today: date | None = None) -> WizardState:
        self._ensure_editable()
        self._state = wizard.pick_date(self._state, event_date, today=today)
        self._log_step()
        return self._state

    def pick_time(self, event_time: str, now: datetime) -> WizardState:
        self._ensure_editable()
        self._state = wizard.pick_time(self._state, event_time, now)
        self._log_step()
        return self._state

    def update_details(self, /, **fields: str) -> WizardState:
        self._ensure_editable()
        self._state = wizard.update_details(self._state, **fields)
        return self._state

    def submit_details(self) -> WizardState:
        self._ensure_editable()
        self._state = wizard.submit_details(self._state)
        self._log_step()
        return self._state

    def back(self) -> WizardState:
        self._ensure_editable()
        self._state = wizard.back(self._state)
        self._banner = None
        self._pending_gateway = None
        self._log_step()
        return self._state

    def restart(self) -> WizardState:
        """Start over. Any response still in flight belongs to the old generation and is dropped."""
        self._generation += 1
        self._busy = False
        self._state = wizard.start()
        self._banner = None
        self._record = None
        self._pending_gateway = None
        self._gateway_hold = None
        self._log_step()
        return self._state

    def dismiss_banner(self) -> None:
        self._banner = None

    # ── payment ──────────────────────────────────────────────

    async def confirm_pay(self, transaction_id: str | None) -> CheckoutOutcome:
        """Gate, then create the booking with a manual transaction id."""
        if self._busy or self._record is not None:
            return CheckoutOutcome(status=OutcomeStatus.ignored)
        checkout = self._require_checkout()

        try:
            proof = validate_transaction_id(transaction_id)
        except InvalidProofFormat as e:
            return self._finish(OutcomeStatus.invalid_proof, Banner(level="error", message=str(e)))

        generation = self._begin()
        try:
            verdict = await self._gate.check(checkout)
            if self._is_stale(generation):
                return CheckoutOutcome(status=OutcomeStatus.stale)
            if not verdict.available:
                return self._gate_failure(verdict)

            try:
                record = await self._reconciliation.submit_manual_payment(checkout, proof)
            except PaymentRejected as e:
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(OutcomeStatus.payment_failed, Banner(level="error", message=e.message))
            except (BackendUpstreamError, BackendContractError) as e:
                self._logger.warning("Booking request failed", extra=self._extra(reason=str(e)))
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(
                    OutcomeStatus.payment_failed, Banner(level="error", message=UPSTREAM_FAILURE_MESSAGE)
                )

            if self._is_stale(generation):
                return CheckoutOutcome(status=OutcomeStatus.stale)
            return self._confirmed(record)
        finally:
            self._end(generation)

    async def start_gateway_checkout(self) -> CheckoutOutcome:
        """Gate, then open a hosted-gateway order for the current checkout."""
        if self._busy or self._record is not None:
            return CheckoutOutcome(status=OutcomeStatus.ignored)
        checkout = self._require_checkout()
        held = self._held_booking_id(checkout)

        generation = self._begin()
        try:
            # a held booking would match its own duplicate check
            verdict = await self._gate.check(checkout, check_duplicates=held is None)
            if self._is_stale(generation):
                return CheckoutOutcome(status=OutcomeStatus.stale)
            if not verdict.available:
                return self._gate_failure(verdict)

            try:
                if held is None:
                    held = await self._reconciliation.create_pending_booking(checkout)
                    if self._is_stale(generation):
                        return CheckoutOutcome(status=OutcomeStatus.stale)
                    self._gateway_hold = (checkout, held)
                gateway = await self._reconciliation.open_gateway_order(checkout, held)
            except PaymentRejected as e:
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(OutcomeStatus.payment_failed, Banner(level="error", message=e.message))
            except (BackendUpstreamError, BackendContractError) as e:
                self._logger.warning("Gateway order failed", extra=self._extra(reason=str(e)))
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(
                    OutcomeStatus.payment_failed, Banner(level="error", message=UPSTREAM_FAILURE_MESSAGE)
                )

            if self._is_stale(generation):
                return CheckoutOutcome(status=OutcomeStatus.stale)
            self._pending_gateway = gateway
            self._banner = None
            return CheckoutOutcome(status=OutcomeStatus.gateway_ready, gateway=gateway)
        finally:
            self._end(generation)

    async def complete_gateway_payment(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        payment_type: GatewayPaymentType = GatewayPaymentType.deposit,
    ) -> CheckoutOutcome:
        """Handle the gateway's success callback."""
        if self._busy or self._record is not None:
            return CheckoutOutcome(status=OutcomeStatus.ignored)
        self._require_checkout()
        if self._pending_gateway is None:
            raise WizardContractError("No gateway checkout is open")

        try:
            proof = validate_gateway_proof(
                GatewayProof(
                    order_id=order_id,
                    payment_id=payment_id,
                    signature=signature,
                    payment_type=payment_type,
                )
            )
        except InvalidProofFormat as e:
            return self._finish(OutcomeStatus.invalid_proof, Banner(level="error", message=str(e)))

        generation = self._begin()
        try:
            try:
                record = await self._reconciliation.complete_gateway_payment(proof)
            except PaymentRejected as e:
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(OutcomeStatus.payment_failed, Banner(level="error", message=e.message))
            except (BackendUpstreamError, BackendContractError) as e:
                self._logger.warning("Payment verification failed", extra=self._extra(reason=str(e)))
                if self._is_stale(generation):
                    return CheckoutOutcome(status=OutcomeStatus.stale)
                return self._finish(
                    OutcomeStatus.payment_failed,
                    Banner(level="error", message=f"Payment verification failed: {UPSTREAM_FAILURE_MESSAGE}"),
                )

            if self._is_stale(generation):
                return CheckoutOutcome(status=OutcomeStatus.stale)
            self._pending_gateway = None
            self._gateway_hold = None
            return self._confirmed(record)
        finally:
            self._end(generation)

    def dismiss_gateway_checkout(self) -> CheckoutOutcome:
        """Handle the gateway's dismiss callback. Nothing is submitted."""
        if self._busy:
            return CheckoutOutcome(status=OutcomeStatus.ignored)
        self._pending_gateway = None
        banner = self._reconciliation.dismiss_gateway_checkout()
        return self._finish(OutcomeStatus.cancelled, banner)

    # ── internals ────────────────────────────────────────────

    def _require_checkout(self) -> Checkout:
        if not isinstance(self._state, Checkout):
            raise WizardContractError(f"Payment is only possible at checkout, current step is {self._state.step.value}")
        return self._state

    def _ensure_editable(self) -> None:
        if self._busy:
            raise WizardBusy("A payment request is still in progress")
        if self._record is not None:
            raise WizardContractError("Booking already confirmed, restart to make another booking")

    def _held_booking_id(self, checkout: Checkout) -> str | None:
        if self._gateway_hold is None or self._gateway_hold[0] != checkout:
            return None
        return self._gateway_hold[1]

    def _begin(self) -> int:
        self._busy = True
        self._banner = None
        return self._generation

    def _end(self, generation: int) -> None:
        if generation == self._generation:
            self._busy = False

    def _is_stale(self, generation: int) -> bool:
        stale = generation != self._generation
        if stale:
            self._logger.info("Discarding stale response", extra=self._extra(generation=generation))
        return stale

    def _gate_failure(self, verdict: AvailabilityVerdict) -> CheckoutOutcome:
        status = OutcomeStatus.gate_failed if verdict.kind == VerdictKind.transport else OutcomeStatus.gate_rejected
        self._banner = Banner(level="error", message=verdict.reason or "")
        return CheckoutOutcome(status=status, banner=self._banner, verdict=verdict)

    def _finish(self, status: OutcomeStatus, banner: Banner) -> CheckoutOutcome:
        self._banner = banner
        return CheckoutOutcome(status=status, banner=banner)

    def _confirmed(self, record: BookingRecord) -> CheckoutOutcome:
        self._record = record
        self._banner = None
        self._logger.info("Booking confirmed", extra=self._extra(unique_id=record.unique_id))
        return CheckoutOutcome(status=OutcomeStatus.confirmed, record=record, route=CONFIRMATION_ROUTE)

    def _log_step(self) -> None:
        self._logger.info("Wizard step", extra=self._extra(step=self._state.step.value))

    def _extra(self, **extra: object) -> dict[str, object]:
        return {"session_id": self.session_id, **extra}
