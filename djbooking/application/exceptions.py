class BookingFlowError(Exception):
    """Base class for errors raised by the booking flow."""
    pass


class UnknownEventType(BookingFlowError, ValueError):
    """Raised when an event type is not in the price table."""
    pass


class InvalidProofFormat(BookingFlowError, ValueError):
    """Raised when a payment proof is malformed and must not be submitted."""
    pass


class UnknownBookingId(BookingFlowError, ValueError):
    """Raised when a unique id carries neither the BK nor the EQ prefix."""
    pass


class WizardContractError(BookingFlowError):
    """Raised when a transition is invoked from the wrong step or with data the UI must never offer."""
    pass


class WizardBusy(BookingFlowError):
    """Raised when navigation is attempted while a payment or availability request is in flight."""
    pass


class PaymentRejected(BookingFlowError):
    """Raised when the backend refuses a booking or a payment verification."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendUpstreamError(RuntimeError):
    """Raised when the booking backend fails (timeouts, network errors, service unavailable)."""
    pass


class BackendContractError(RuntimeError):
    """Raised when the booking backend answers with a body the client cannot read."""
    pass
