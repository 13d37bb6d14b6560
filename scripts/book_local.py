#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local booking harness (no HTTP, in-memory backend).

Usage:
  python3 scripts/book_local.py

What it does:
- Walks one CheckoutSession through date, time, details and checkout
- Talks to MockBookingBackend, so nothing leaves the machine
- Prints the step, banner and final booking record after every action
"""

import asyncio
from datetime import date, datetime

from djbooking.application.use_cases.availability_gate import AvailabilityGateUseCase
from djbooking.application.use_cases.checkout_session import CheckoutSession, OutcomeStatus
from djbooking.application.use_cases.confirmation import Redirect, render_confirmation
from djbooking.application.use_cases.payment_reconciliation import PaymentReconciliationUseCase
from djbooking.application.use_cases.wizard import quoted_price
from djbooking.application.utils.slot_policy import available_times, bookable_dates
from djbooking.domain.entities.event_type import EventType
from djbooking.domain.entities.wizard_state import Checkout, EnterDetails, SelectDate, SelectTime
from djbooking.infrastructure.backend.mock_backend import MockBookingBackend


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print("Commands: /back, /quit")
    print("-" * 60)


def _choose(prompt: str, options: list[str]) -> str:
    for i, option in enumerate(options, 1):
        print(f"  {i}. {option}")
    while True:
        raw = input(f"{prompt} > ").strip()
        if raw.startswith("/"):
            return raw
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1]
        print("Pick a number from the list.")


async def run() -> None:
    backend = MockBookingBackend()
    session = CheckoutSession(
        gate=AvailabilityGateUseCase(backend=backend),
        reconciliation=PaymentReconciliationUseCase(backend=backend, merchant_name="Local DJ"),
        session_id="local",
    )
    _print_header()

    while True:
        state = session.state
        now = datetime.now()
        print(f"\n[{state.step.value}]")
        if session.banner:
            print(f"!! {session.banner.message}")

        try:
            if isinstance(state, SelectDate):
                days = [d.isoformat() for d in bookable_dates(date.today(), 14)]
                choice = _choose("date", days)
                if choice in ("/quit", "/exit"):
                    return
                if not choice.startswith("/"):
                    session.pick_date(date.fromisoformat(choice), today=now.date())
            elif isinstance(state, SelectTime):
                times = available_times(state.event_date, now)
                if not times:
                    print("No available time slots left for today")
                choice = _choose("time", times)
                if choice == "/back":
                    session.back()
                elif choice in ("/quit", "/exit"):
                    return
                elif not choice.startswith("/"):
                    session.pick_time(choice, now)
            elif isinstance(state, EnterDetails):
                event_type = _choose("event type", [e.value for e in EventType])
                if event_type == "/back":
                    session.back()
                    continue
                session.update_details(
                    event_type=event_type,
                    name=input("name > ").strip(),
                    email=input("email > ").strip(),
                    phone=input("phone > ").strip(),
                    street=input("street > ").strip(),
                    city=input("city > ").strip(),
                    state=input("state > ").strip(),
                )
                print(f"Price: ${quoted_price(session.state.draft)}")
                session.submit_details()
                if isinstance(session.state, EnterDetails):
                    for field, error in session.state.field_errors.items():
                        print(f"  {field}: {error}")
            elif isinstance(state, Checkout):
                print(f"{state.event_type.value} on {state.event_date:%B %d, %Y} at {state.event_time}")
                print(f"Deposit: ${state.price}")
                raw = input("17-character transaction id (or /back) > ").strip()
                if raw == "/back":
                    session.back()
                    continue
                if raw in ("/quit", "/exit"):
                    return
                outcome = await session.confirm_pay(raw)
                if outcome.status == OutcomeStatus.confirmed:
                    view = render_confirmation(outcome.record)
                    if isinstance(view, Redirect):
                        print(f"(redirect to {view.to})")
                    else:
                        print(f"\n--- {view.title} ---")
                        for key, value in view.booking.items():
                            print(f"{key}: {value}")
                    return
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
