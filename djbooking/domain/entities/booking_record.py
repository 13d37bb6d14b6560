from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class BookingStatus(str, Enum):
    pending = "PENDING"
    confirmed = "CONFIRMED"
    rejected = "REJECTED"


@dataclass(frozen=True)
class BookingRecord:
    """Read-only copy of the record the backend returned on creation.

    The payload is kept exactly as received. Accessors only read from it,
    nothing is derived from the local draft.
    """

    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "BookingRecord":
        return cls(payload=MappingProxyType(dict(data)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    @property
    def unique_id(self) -> str | None:
        return self.payload.get("uniqueId")

    @property
    def amount(self) -> Any:
        return self.payload.get("amount")

    @property
    def event_type(self) -> str | None:
        return self.payload.get("eventType")

    @property
    def status(self) -> BookingStatus | None:
        raw = self.payload.get("status")
        try:
            return BookingStatus(raw) if raw else None
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        return dict(self.payload)
