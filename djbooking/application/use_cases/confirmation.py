from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from djbooking.domain.entities.booking_record import BookingRecord

ENTRY_ROUTE = "/"

DISPLAY_FIELDS = (
    "uniqueId",
    "eventType",
    "eventDate",
    "eventTime",
    "amount",
    "clientName",
    "email",
    "phone",
    "street",
    "city",
    "state",
    "status",
)


@dataclass(frozen=True)
class ConfirmationView:
    title: str
    booking: dict[str, Any]


@dataclass(frozen=True)
class Redirect:
    to: str


def render_confirmation(record: BookingRecord | None) -> ConfirmationView | Redirect:
    """Show the record handed over by checkout, or send the visitor back to the entry point."""
    if record is None:
        return Redirect(to=ENTRY_ROUTE)
    return ConfirmationView(
        title="Booking Confirmed!",
        booking={key: record.get(key) for key in DISPLAY_FIELDS if key in record.payload},
    )
