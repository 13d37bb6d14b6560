from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from djbooking.application.dto.backend_reply import BackendReply


class BookingBackendPort(ABC):
    @abstractmethod
    async def check_slot_block(self, date: str, time: str) -> BackendReply:
        """Ask whether the operator blocked this date/time. `date` is MM-DD-YYYY."""
        raise NotImplementedError

    @abstractmethod
    async def check_duplicate_booking(self, event_date: str, event_time: str, email: str) -> BackendReply:
        """Ask whether this client already holds a booking for the slot."""
        raise NotImplementedError

    @abstractmethod
    async def create_booking(self, payload: dict[str, Any]) -> BackendReply:
        """Create a booking. A successful reply body is the booking record."""
        raise NotImplementedError

    @abstractmethod
    async def create_gateway_order(self, unique_id: str, amount: int) -> BackendReply:
        """Open a hosted-gateway order for an existing booking."""
        raise NotImplementedError

    @abstractmethod
    async def verify_gateway_payment(self, payload: dict[str, Any]) -> BackendReply:
        """Verify gateway-issued identifiers. A successful reply body is the booking record."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release transport resources. Backends without any keep the default."""
        return None
