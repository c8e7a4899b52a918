"""
Billing module.

Handles Razorpay orders, gateway signature verification and the
reconciliation of captured payments into subscriptions.

Public API:
- IBillingService: Interface for billing operations
- PaymentReconciler: Idempotent capture-to-entitlement conversion
- Payment, PaymentStatus, WebhookEvent: Models
- Billing exceptions: SignatureInvalidError, etc.
"""

from .interfaces import IBillingService
from .reconciler import PaymentReconciler
from .models import (
    Payment,
    PaymentStatus,
    PLAN_PRICES,
    PaymentCapturedEvent,
    OtherEvent,
    WebhookEvent,
    ReconcileRequest,
    ReconcileResult,
    ReconcileOutcome,
    ReconcileSource,
)
from .exceptions import (
    BillingError,
    InvalidPlanError,
    SignatureInvalidError,
    WebhookPayloadError,
    ReconciliationTransientError,
    DataIntegrityAnomalyError,
    PaymentNotFoundError,
    GatewayError,
    GatewayNotConfiguredError,
)

__all__ = [
    # Interface
    "IBillingService",
    "PaymentReconciler",
    # Models
    "Payment",
    "PaymentStatus",
    "PLAN_PRICES",
    "PaymentCapturedEvent",
    "OtherEvent",
    "WebhookEvent",
    "ReconcileRequest",
    "ReconcileResult",
    "ReconcileOutcome",
    "ReconcileSource",
    # Exceptions
    "BillingError",
    "InvalidPlanError",
    "SignatureInvalidError",
    "WebhookPayloadError",
    "ReconciliationTransientError",
    "DataIntegrityAnomalyError",
    "PaymentNotFoundError",
    "GatewayError",
    "GatewayNotConfiguredError",
]
