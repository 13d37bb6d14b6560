from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from djbooking.domain.entities.booking_draft import BookingDraft
from djbooking.domain.entities.client_details import ClientDetails
from djbooking.domain.entities.event_type import PRICING_TABLE, EventType


class Step(str, Enum):
    select_date = "select_date"
    select_time = "select_time"
    enter_details = "enter_details"
    checkout = "checkout"


@dataclass(frozen=True)
class SelectDate:
    draft: BookingDraft = BookingDraft()
    step: Step = field(default=Step.select_date, init=False)


@dataclass(frozen=True)
class SelectTime:
    event_date: date
    draft: BookingDraft
    step: Step = field(default=Step.select_time, init=False)


@dataclass(frozen=True)
class EnterDetails:
    event_date: date
    event_time: str
    draft: BookingDraft
    field_errors: dict[str, str] = field(default_factory=dict)
    step: Step = field(default=Step.enter_details, init=False)


@dataclass(frozen=True)
class Checkout:
    event_date: date
    event_time: str
    event_type: EventType
    client: ClientDetails
    price: int
    draft: BookingDraft
    step: Step = field(default=Step.checkout, init=False)

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("name", "email", "street", "city")
            if not getattr(self.client, name).strip()
        ]
        if missing:
            raise ValueError(f"Checkout requires client fields: {', '.join(missing)}")
        if not isinstance(self.event_type, EventType):
            raise ValueError(f"Checkout requires a resolved event type, got {self.event_type!r}")
        if self.price != PRICING_TABLE[self.event_type]:
            raise ValueError(
                f"Price {self.price} does not match {self.event_type.value} ({PRICING_TABLE[self.event_type]})"
            )


WizardState = SelectDate | SelectTime | EnterDetails | Checkout
