from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from djbooking.domain.entities.client_details import ClientDetails


@dataclass(frozen=True)
class BookingDraft:
    """Form values retained across wizard steps.

    The draft is never trusted on its own: each step state carries the
    validated subset it needs. Keeping the raw values here is what lets
    back-navigation return to a populated form.
    """

    event_date: date | None = None
    event_time: str | None = None
    event_type: str = ""  # raw form value, resolved against the price table on submit
    client: ClientDetails = ClientDetails()

    def with_date(self, event_date: date) -> "BookingDraft":
        # a new date always invalidates the previously chosen slot
        return replace(self, event_date=event_date, event_time=None)

    def with_time(self, event_time: str) -> "BookingDraft":
        return replace(self, event_time=event_time)
