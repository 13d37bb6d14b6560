from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from djbooking.api.v1.schemas import BannerSchema, PaymentOutcomeSchema, WizardViewSchema
from djbooking.application.use_cases.checkout_session import CheckoutOutcome, CheckoutSession
from djbooking.application.use_cases.wizard import quoted_price
from djbooking.application.utils.slot_policy import available_times, bookable_dates
from djbooking.core.config import settings
from djbooking.domain.entities.banner import Banner
from djbooking.domain.entities.wizard_state import Checkout, EnterDetails, SelectDate, SelectTime


def banner_schema(banner: Banner | None) -> BannerSchema | None:
    if banner is None:
        return None
    return BannerSchema(level=banner.level, message=banner.message, dismissible=banner.dismissible)


def wizard_view(session: CheckoutSession, now: datetime, days: int | None = None) -> WizardViewSchema:
    state = session.state
    draft = state.draft
    view = WizardViewSchema(
        session_id=session.session_id,
        step=state.step.value,
        busy=session.busy,
        banner=banner_schema(session.banner),
        draft={
            "eventDate": draft.event_date.isoformat() if draft.event_date else None,
            "eventTime": draft.event_time,
            "eventType": draft.event_type,
            "client": asdict(draft.client),
        },
        price=quoted_price(draft),
    )

    if isinstance(state, SelectDate):
        view.available_dates = bookable_dates(now.date(), days or settings.BOOKABLE_DAYS)
    elif isinstance(state, SelectTime):
        view.available_times = available_times(state.event_date, now)
    elif isinstance(state, EnterDetails):
        view.field_errors = dict(state.field_errors)
    elif isinstance(state, Checkout):
        view.price = state.price
        view.payment_reference = settings.MANUAL_PAYMENT_REFERENCE
        if session.pending_gateway is not None:
            view.gateway = asdict(session.pending_gateway)
    return view


def outcome_view(session: CheckoutSession, outcome: CheckoutOutcome, now: datetime) -> PaymentOutcomeSchema:
    return PaymentOutcomeSchema(
        outcome=outcome.status.value,
        banner=banner_schema(outcome.banner),
        route=outcome.route,
        record=outcome.record.to_dict() if outcome.record else None,
        gateway=asdict(outcome.gateway) if outcome.gateway else None,
        state=wizard_view(session, now),
    )
