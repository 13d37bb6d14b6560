from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProofKind(str, Enum):
    manual = "manual"
    gateway = "gateway"


class GatewayPaymentType(str, Enum):
    deposit = "DEPOSIT"
    balance = "BALANCE"


@dataclass(frozen=True)
class ManualProof:
    transaction_id: str
    kind: ProofKind = ProofKind.manual


@dataclass(frozen=True)
class GatewayProof:
    order_id: str
    payment_id: str
    signature: str
    payment_type: GatewayPaymentType = GatewayPaymentType.deposit
    kind: ProofKind = ProofKind.gateway


PaymentProof = ManualProof | GatewayProof
