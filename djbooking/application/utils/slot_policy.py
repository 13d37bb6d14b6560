from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from djbooking.application.exceptions import UnknownEventType
from djbooking.domain.entities.event_type import PRICING_TABLE, EventType

WEEKDAY_TIMES: tuple[str, ...] = ("5:00 PM", "7:00 PM", "9:00 PM")
WEEKEND_TIMES: tuple[str, ...] = (
    "8:00 AM",
    "10:00 AM",
    "12:00 PM",
    "2:00 PM",
    "4:00 PM",
    "6:00 PM",
    "8:00 PM",
)

_SLOT_LABEL = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])\s*$")


def resolve_event_type(value: str | EventType | None) -> EventType:
    if isinstance(value, EventType):
        return value
    if not value:
        raise UnknownEventType("Event type is required")
    try:
        return EventType(value)
    except ValueError:
        raise UnknownEventType(f"Unknown event type: {value}") from None


def price_for(event_type: str | EventType | None) -> int:
    """Deposit price for an event type. Never defaults to 0 for an unknown type."""
    return PRICING_TABLE[resolve_event_type(event_type)]


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def allowed_times(day: date) -> list[str]:
    return list(WEEKEND_TIMES if is_weekend(day) else WEEKDAY_TIMES)


def parse_slot_time(label: str) -> tuple[int, int]:
    """Parse a 12-hour slot label like '6:00 PM' into (hour, minute) on a 24h clock."""
    match = _SLOT_LABEL.match(label)
    if not match:
        raise ValueError(f"Unrecognised slot label: {label!r}")
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    period = match.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise ValueError(f"Unrecognised slot label: {label!r}")
    if period == "PM" and hour != 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return hour, minute


def filter_future_slots(day: date, times: list[str] | tuple[str, ...], now: datetime) -> list[str]:
    """Drop slots that have already started when `day` is today; other days pass through."""
    if day != now.date():
        return list(times)
    current = (now.hour, now.minute)
    return [label for label in times if parse_slot_time(label) > current]


def available_times(day: date, now: datetime) -> list[str]:
    return filter_future_slots(day, allowed_times(day), now)


def bookable_dates(today: date, days: int = 30) -> list[date]:
    return [today + timedelta(days=offset) for offset in range(days)]


def format_gate_date(day: date) -> str:
    return day.strftime("%m-%d-%Y")


def to_minor_units(amount: int | float | str) -> int:
    """Gateway amount in the currency's minor unit (cents for USD)."""
    return int(round(float(amount) * 100))
