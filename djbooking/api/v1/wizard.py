from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query

from djbooking.api.v1.schemas import (
    ClientDetailsSchema,
    GatewaySuccessSchema,
    ManualPaymentSchema,
    PaymentOutcomeSchema,
    PickDateSchema,
    PickTimeSchema,
    WizardViewSchema,
)
from djbooking.api.v1.views import outcome_view, wizard_view
from djbooking.application.exceptions import UnknownEventType, WizardBusy, WizardContractError
from djbooking.application.ports.wizard_store import WizardStorePort
from djbooking.application.use_cases.checkout_session import CheckoutSession
from djbooking.core.config import settings
from djbooking.wiring.dependencies import get_wizard_store, new_checkout_session

router = APIRouter()
logger = logging.getLogger(__name__)


def get_clock() -> Callable[[], datetime]:
    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)
    # naive local wall-clock time, slot labels carry no zone
    return lambda: datetime.now(tz).replace(tzinfo=None)


def _session(session_id: str, store: WizardStorePort) -> CheckoutSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return session


def _guarded(action: Callable[[], object]) -> None:
    try:
        action()
    except (WizardContractError, WizardBusy) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UnknownEventType as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=WizardViewSchema, status_code=201)
async def create_session(
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = new_checkout_session()
    store.create(session)
    logger.info("Booking session created", extra={"session_id": session.session_id})
    return wizard_view(session, clock())


@router.get("/{session_id}", response_model=WizardViewSchema)
async def get_session(
    session_id: str,
    days: int | None = Query(None, ge=1, le=365),
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    return wizard_view(_session(session_id, store), clock(), days=days)


@router.post("/{session_id}/date", response_model=WizardViewSchema)
async def pick_date(
    session_id: str,
    req: PickDateSchema,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    now = clock()
    _guarded(lambda: session.pick_date(req.date, today=now.date()))
    return wizard_view(session, now)


@router.post("/{session_id}/time", response_model=WizardViewSchema)
async def pick_time(
    session_id: str,
    req: PickTimeSchema,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    now = clock()
    _guarded(lambda: session.pick_time(req.time, now))
    return wizard_view(session, now)


@router.post("/{session_id}/details", response_model=WizardViewSchema)
async def update_details(
    session_id: str,
    req: ClientDetailsSchema,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    fields = {k: v or "" for k, v in req.model_dump(exclude_unset=True).items()}
    _guarded(lambda: session.update_details(**fields))
    return wizard_view(session, clock())


@router.post("/{session_id}/details/submit", response_model=WizardViewSchema)
async def submit_details(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    _guarded(session.submit_details)
    return wizard_view(session, clock())


@router.post("/{session_id}/back", response_model=WizardViewSchema)
async def back(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    _guarded(session.back)
    return wizard_view(session, clock())


@router.post("/{session_id}/restart", response_model=WizardViewSchema)
async def restart(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    session.restart()
    return wizard_view(session, clock())


@router.post("/{session_id}/banner/dismiss", response_model=WizardViewSchema)
async def dismiss_banner(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    session.dismiss_banner()
    return wizard_view(session, clock())


@router.post("/{session_id}/pay", response_model=PaymentOutcomeSchema)
async def pay(
    session_id: str,
    req: ManualPaymentSchema,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    try:
        outcome = await session.confirm_pay(req.transaction_id)
    except WizardContractError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return outcome_view(session, outcome, clock())


@router.post("/{session_id}/gateway/checkout", response_model=PaymentOutcomeSchema)
async def gateway_checkout(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    try:
        outcome = await session.start_gateway_checkout()
    except WizardContractError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return outcome_view(session, outcome, clock())


@router.post("/{session_id}/gateway/success", response_model=PaymentOutcomeSchema)
async def gateway_success(
    session_id: str,
    req: GatewaySuccessSchema,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    try:
        outcome = await session.complete_gateway_payment(
            order_id=req.order_id,
            payment_id=req.payment_id,
            signature=req.signature,
            payment_type=req.payment_type,
        )
    except WizardContractError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return outcome_view(session, outcome, clock())


@router.post("/{session_id}/gateway/dismiss", response_model=PaymentOutcomeSchema)
async def gateway_dismiss(
    session_id: str,
    store: WizardStorePort = Depends(get_wizard_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    session = _session(session_id, store)
    outcome = session.dismiss_gateway_checkout()
    return outcome_view(session, outcome, clock())
