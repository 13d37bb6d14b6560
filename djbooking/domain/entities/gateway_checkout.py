from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GatewayCheckout:
    """Everything a hosted checkout page needs to open for one order."""

    unique_id: str
    order_id: str
    amount_minor: int
    currency: str
    key_id: str
    merchant_name: str
    description: str
    prefill: dict[str, str] = field(default_factory=dict)
    notes: dict[str, str] = field(default_factory=dict)
