from __future__ import annotations

import secrets
import time

from djbooking.application.ports.wizard_store import WizardStorePort
from djbooking.application.use_cases.checkout_session import CheckoutSession


class MemoryWizardStore(WizardStorePort):
    def __init__(self, session_limit: int = 1000) -> None:
        self._sessions: dict[str, CheckoutSession] = {}
        self._created_at: dict[str, float] = {}
        self._session_limit = session_limit

    def create(self, session: CheckoutSession) -> str:
        session_id = secrets.token_urlsafe(18)
        session.session_id = session_id
        self._sessions[session_id] = session
        self._created_at[session_id] = time.time()
        if len(self._sessions) > self._session_limit:
            oldest = min(self._created_at, key=self._created_at.__getitem__)
            self.delete(oldest)
        return session_id

    def get(self, session_id: str) -> CheckoutSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._created_at.pop(session_id, None)
