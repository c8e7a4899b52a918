"""
Billing module data models.

These models define the data structures used by the billing module:
payment rows, order/verify API payloads, gateway webhook events and
reconciliation results.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

from modules.subscriptions.models import Plan, Subscription


class PaymentStatus(str, Enum):
    """Payment lifecycle. Rows are never deleted."""

    PENDING = "pending"      # Order opened, nothing captured yet
    COMPLETED = "completed"  # Capture reconciled into an entitlement
    FAILED = "failed"        # Client verification presented a bad signature


# Plan prices in whole rupees; the gateway is charged in paise
PLAN_PRICES: dict[Plan, int] = {
    Plan.ONE_MONTH: 2999,
    Plan.SIX_MONTHS: 14999,
    Plan.TWELVE_MONTHS: 24999,
}


def plan_price(plan: Plan) -> int:
    """Price of a plan in whole currency units."""
    return PLAN_PRICES[Plan(plan)]


class Payment(BaseModel):
    """A payment row, keyed by the gateway order id."""

    id: str = Field(..., description="Payment ID (UUID)")
    user_id: str = Field(..., description="Identity being credited")
    razorpay_order_id: str = Field(..., description="Gateway order id (unique)")
    razorpay_payment_id: Optional[str] = Field(None, description="Set once captured")
    razorpay_signature: Optional[str] = Field(None, description="Gateway signature, if any")
    plan: Plan = Field(..., description="Purchased plan")
    amount: int = Field(..., description="Amount in whole currency units")
    currency: str = Field(default="INR", description="ISO currency code")
    status: PaymentStatus = Field(..., description="Lifecycle status")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# API payloads
# -----------------------------------------------------------------------------


class CreateOrderRequest(BaseModel):
    """Request to open a gateway order for a plan."""

    plan: str = Field(..., description="Plan: 1m, 6m or 12m")


class OrderResponse(BaseModel):
    """Opened gateway order, handed to the client checkout widget."""

    order_id: str = Field(..., description="Gateway order id")
    amount: int = Field(..., description="Amount in the smallest currency unit (paise)")
    currency: str = Field(..., description="ISO currency code")
    plan: Plan = Field(..., description="Plan being purchased")
    key_id: str = Field(..., description="Public gateway key for the checkout widget")


class VerifyPaymentRequest(BaseModel):
    """Client-side checkout callback payload."""

    gateway_order_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("gateway_order_id", "razorpay_order_id"),
    )
    gateway_payment_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("gateway_payment_id", "razorpay_payment_id"),
    )
    gateway_signature: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("gateway_signature", "razorpay_signature"),
    )


class PaymentSummary(BaseModel):
    """Payment info returned to the client after verification."""

    order_id: str
    payment_id: Optional[str] = None
    status: PaymentStatus
    plan: Plan
    amount: int


class VerifyPaymentResponse(BaseModel):
    """Client-verification result."""

    verified: bool
    message: str
    payment: Optional[PaymentSummary] = None


class WebhookAck(BaseModel):
    """Webhook acknowledgement. Always sent with a 2xx status."""

    received: bool = True
    outcome: str


# -----------------------------------------------------------------------------
# Gateway webhook events (tagged variant)
# -----------------------------------------------------------------------------


class PaymentNotes(BaseModel):
    """Order notes echoed back by the gateway; may be empty in test flows."""

    model_config = {"extra": "ignore"}

    user_id: Optional[str] = None
    plan: Optional[str] = None


class PaymentEntity(BaseModel):
    """The captured payment inside a webhook payload."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1)
    amount: Optional[int] = None
    currency: Optional[str] = None
    notes: PaymentNotes = Field(default_factory=PaymentNotes)
    signature: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def empty_notes(cls, v: Any) -> Any:
        # Razorpay serializes empty notes as []
        return v if isinstance(v, (dict, PaymentNotes)) else {}


class PaymentEnvelope(BaseModel):
    entity: PaymentEntity


class CapturedPayload(BaseModel):
    model_config = {"extra": "ignore"}

    payment: PaymentEnvelope


class PaymentCapturedEvent(BaseModel):
    """A payment.captured webhook, fully validated."""

    model_config = {"extra": "ignore"}

    event: Literal["payment.captured"]
    payload: CapturedPayload

    @property
    def payment(self) -> PaymentEntity:
        return self.payload.payment.entity


class OtherEvent(BaseModel):
    """Any other webhook event; acknowledged and ignored."""

    model_config = {"extra": "ignore"}

    event: str
    payload: dict[str, Any] = Field(default_factory=dict)


WebhookEvent = Union[PaymentCapturedEvent, OtherEvent]


# -----------------------------------------------------------------------------
# Reconciliation
# -----------------------------------------------------------------------------


class ReconcileSource(str, Enum):
    """Which entry path delivered the captured-payment fact."""

    WEBHOOK = "webhook"
    CLIENT = "client"


class ReconcileRequest(BaseModel):
    """A verified captured-payment fact."""

    order_id: str
    payment_id: str
    signature: Optional[str] = None
    user_id: Optional[str] = None  # Claimed identity, used only if no row exists
    plan: Optional[Plan] = None    # Claimed plan, used only if no row exists
    source: ReconcileSource


class ReconcileOutcome(str, Enum):
    """What a reconciliation did."""

    APPLIED = "applied"                  # This call completed the payment and credited it
    ALREADY_APPLIED = "already_applied"  # Another call got there first; no change


class ReconcileResult(BaseModel):
    outcome: ReconcileOutcome
    payment: Payment
    subscription: Optional[Subscription] = None
