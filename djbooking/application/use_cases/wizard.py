"""
Booking wizard transitions.

Every function takes the current step state and returns the next one without
touching anything else. Calling a transition from a step that does not own it
is a programming error and raises WizardContractError; user-correctable
problems on the details form are reported through EnterDetails.field_errors.
"""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime

from djbooking.application.exceptions import UnknownEventType, WizardContractError
from djbooking.application.utils.slot_policy import available_times, price_for, resolve_event_type
from djbooking.domain.entities.booking_draft import BookingDraft
from djbooking.domain.entities.wizard_state import (
    Checkout,
    EnterDetails,
    SelectDate,
    SelectTime,
    WizardState,
)

DETAIL_FIELDS = ("name", "email", "phone", "street", "apt", "city", "state", "message")
REQUIRED_FIELDS = ("name", "email", "event_type", "street", "city")
NAME_MAX_LENGTH = 100

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def start(draft: BookingDraft | None = None) -> SelectDate:
    return SelectDate(draft=draft or BookingDraft())


def pick_date(state: WizardState, event_date: date, today: date | None = None) -> SelectTime:
    _expect(state, SelectDate, "pick_date")
    if today is not None and event_date < today:
        raise WizardContractError(f"Cannot book a past date: {event_date.isoformat()}")
    return SelectTime(event_date=event_date, draft=state.draft.with_date(event_date))


def pick_time(state: WizardState, event_time: str, now: datetime) -> EnterDetails:
    _expect(state, SelectTime, "pick_time")
    offered = available_times(state.event_date, now)
    if event_time not in offered:
        raise WizardContractError(
            f"Time {event_time!r} is not offered for {state.event_date.isoformat()}: {offered}"
        )
    return EnterDetails(
        event_date=state.event_date,
        event_time=event_time,
        draft=state.draft.with_time(event_time),
    )


def update_details(current: WizardState, /, **fields: str) -> EnterDetails:
    # positional-only: "state" is also a client address field
    _expect(current, EnterDetails, "update_details")
    unknown = set(fields) - set(DETAIL_FIELDS) - {"event_type"}
    if unknown:
        raise WizardContractError(f"Unknown detail fields: {sorted(unknown)}")

    draft = current.draft
    client_updates = {k: v for k, v in fields.items() if k in DETAIL_FIELDS}
    if client_updates:
        draft = replace(draft, client=replace(draft.client, **client_updates))
    if "event_type" in fields:
        draft = replace(draft, event_type=fields["event_type"] or "")

    errors = {k: v for k, v in current.field_errors.items() if k not in fields}
    return replace(current, draft=draft, field_errors=errors)


def validate_details(draft: BookingDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    client = draft.client
    for name in REQUIRED_FIELDS:
        value = draft.event_type if name == "event_type" else getattr(client, name)
        if not (value or "").strip():
            errors[name] = "This field is required."

    if "name" not in errors and len(client.name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name must be at most {NAME_MAX_LENGTH} characters."
    if "email" not in errors and not _EMAIL.match(client.email.strip()):
        errors["email"] = "Please enter a valid email address."
    if "event_type" not in errors:
        try:
            resolve_event_type(draft.event_type)
        except UnknownEventType as e:
            errors["event_type"] = str(e)
    return errors


def submit_details(state: WizardState) -> EnterDetails | Checkout:
    _expect(state, EnterDetails, "submit_details")
    errors = validate_details(state.draft)
    if errors:
        return replace(state, field_errors=errors)

    event_type = resolve_event_type(state.draft.event_type)
    return Checkout(
        event_date=state.event_date,
        event_time=state.event_time,
        event_type=event_type,
        client=state.draft.client,
        price=price_for(event_type),
        draft=state.draft,
    )


def back(state: WizardState) -> WizardState:
    if isinstance(state, Checkout):
        return EnterDetails(event_date=state.event_date, event_time=state.event_time, draft=state.draft)
    if isinstance(state, EnterDetails):
        return SelectTime(event_date=state.event_date, draft=state.draft)
    if isinstance(state, SelectTime):
        return SelectDate(draft=state.draft)
    raise WizardContractError("Already at the first step")


def quoted_price(draft: BookingDraft) -> int | None:
    """Price shown next to the event-type selector; None until a known type is chosen."""
    if not draft.event_type:
        return None
    try:
        return price_for(draft.event_type)
    except UnknownEventType:
        return None


def _expect(state: WizardState, expected: type, transition: str) -> None:
    if not isinstance(state, expected):
        raise WizardContractError(
            f"{transition} is only valid on {expected.__name__}, current step is {state.step.value}"
        )
