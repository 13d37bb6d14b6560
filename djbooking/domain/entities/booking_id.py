from __future__ import annotations

from enum import Enum


class RecordKind(str, Enum):
    booking = "booking"
    enquiry = "enquiry"


ID_PREFIXES = {
    "BK": RecordKind.booking,
    "EQ": RecordKind.enquiry,
}
