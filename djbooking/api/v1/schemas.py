from __future__ import annotations

from datetime import date as date_type
from typing import Any

from pydantic import BaseModel, Field

from djbooking.domain.entities.proof import GatewayPaymentType


class PickDateSchema(BaseModel):
    date: date_type


class PickTimeSchema(BaseModel):
    time: str


class ClientDetailsSchema(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    email: str | None = None
    phone: str | None = None
    event_type: str | None = Field(default=None, alias="eventType")
    street: str | None = None
    apt: str | None = None
    city: str | None = None
    state: str | None = None
    message: str | None = None

    model_config = {"populate_by_name": True}


class ManualPaymentSchema(BaseModel):
    transaction_id: str = Field(alias="transactionId")

    model_config = {"populate_by_name": True}


class GatewaySuccessSchema(BaseModel):
    order_id: str = Field(alias="razorpay_order_id")
    payment_id: str = Field(alias="razorpay_payment_id")
    signature: str = Field(alias="razorpay_signature")
    payment_type: GatewayPaymentType = Field(default=GatewayPaymentType.deposit, alias="paymentType")

    model_config = {"populate_by_name": True}


class BannerSchema(BaseModel):
    level: str
    message: str
    dismissible: bool = True


class WizardViewSchema(BaseModel):
    session_id: str
    step: str
    busy: bool
    banner: BannerSchema | None = None
    draft: dict[str, Any]
    price: int | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    available_dates: list[date_type] = Field(default_factory=list)
    available_times: list[str] = Field(default_factory=list)
    payment_reference: str | None = None
    gateway: dict[str, Any] | None = None


class PaymentOutcomeSchema(BaseModel):
    outcome: str
    banner: BannerSchema | None = None
    route: str | None = None
    record: dict[str, Any] | None = None
    gateway: dict[str, Any] | None = None
    state: WizardViewSchema
