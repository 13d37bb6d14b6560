from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from djbooking.application.ports.wizard_store import WizardStorePort
from djbooking.application.use_cases.confirmation import Redirect, render_confirmation
from djbooking.application.utils.booking_ids import classify_unique_id
from djbooking.application.exceptions import UnknownBookingId
from djbooking.wiring.dependencies import get_wizard_store

router = APIRouter()


@router.get("/confirmation/{session_id}")
async def confirmation(session_id: str, store: WizardStorePort = Depends(get_wizard_store)):
    session = store.get(session_id)
    view = render_confirmation(session.record if session else None)
    if isinstance(view, Redirect):
        return RedirectResponse(url=view.to, status_code=307)

    try:
        kind = classify_unique_id(view.booking.get("uniqueId")).value
    except UnknownBookingId:
        kind = None
    return {"title": view.title, "type": kind, "booking": view.booking}
