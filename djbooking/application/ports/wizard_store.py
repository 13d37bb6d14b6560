from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from djbooking.application.use_cases.checkout_session import CheckoutSession


class WizardStorePort(ABC):
    @abstractmethod
    def create(self, session: "CheckoutSession") -> str:
        """Store a new session and return its id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> "CheckoutSession | None":
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
