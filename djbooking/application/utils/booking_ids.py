from __future__ import annotations

from djbooking.application.exceptions import UnknownBookingId
from djbooking.domain.entities.booking_id import ID_PREFIXES, RecordKind


def classify_unique_id(unique_id: str | None) -> RecordKind:
    """Route an id by its two-character prefix: BK for bookings, EQ for enquiries."""
    prefix = (unique_id or "").strip()[:2]
    kind = ID_PREFIXES.get(prefix)
    if kind is None:
        raise UnknownBookingId(f"Unrecognised id: {unique_id!r}")
    return kind
