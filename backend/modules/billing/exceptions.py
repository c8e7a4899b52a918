"""
Billing module exceptions.

These exceptions are raised by the billing module and caught by the
payment routes, which turn them into stable reason codes. The webhook
boundary never lets any of them reach the caller.
"""

from typing import Optional

from shared.exceptions import (
    PivotDeskError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class BillingError(PivotDeskError):
    """Base exception for billing-related errors."""

    pass


class InvalidPlanError(ValidationError):
    """Raised when an order names an unknown plan."""

    def __init__(self, plan: str):
        super().__init__(
            f"Invalid plan: {plan}",
            code="INVALID_PLAN",
            details={"plan": plan},
        )


class SignatureInvalidError(BillingError):
    """
    Raised when a gateway signature does not verify.

    No entitlement change is ever made after this.
    """

    def __init__(self, source: str, order_id: Optional[str] = None):
        super().__init__(
            "Gateway signature verification failed",
            code="SIGNATURE_INVALID",
            details={"source": source, "order_id": order_id} if order_id else {"source": source},
        )


class WebhookPayloadError(BillingError):
    """Raised when a webhook body cannot be parsed into a known event shape."""

    def __init__(self, reason: str):
        super().__init__(
            f"Malformed webhook payload: {reason}",
            code="WEBHOOK_PAYLOAD_INVALID",
            details={"reason": reason},
        )


class ReconciliationTransientError(BillingError):
    """
    Raised when reconciliation could not finish because the store failed.

    Safe to retry: the payment claim is released before this is raised.
    """

    def __init__(self, order_id: str, reason: str):
        super().__init__(
            "Payment could not be reconciled right now. "
            "Check your subscription status before paying again.",
            code="RECONCILIATION_TRANSIENT",
            details={"order_id": order_id, "reason": reason},
        )


class DataIntegrityAnomalyError(BillingError):
    """
    Raised when a captured payment cannot be attributed to anyone.

    Requires manual reconciliation; never retried automatically.
    """

    def __init__(self, order_id: str, reason: str):
        super().__init__(
            f"Cannot reconcile order {order_id}: {reason}",
            code="DATA_INTEGRITY_ANOMALY",
            details={"order_id": order_id, "reason": reason},
        )


class PaymentNotFoundError(NotFoundError):
    """Raised when an order id is unknown to the caller."""

    def __init__(self, order_id: str):
        super().__init__(
            f"Payment not found: {order_id}",
            code="PAYMENT_NOT_FOUND",
            details={"order_id": order_id},
        )


class GatewayError(ExternalServiceError):
    """Raised when the payment gateway rejects or fails a request."""

    def __init__(self, message: str, gateway_error: Optional[str] = None):
        super().__init__(
            message,
            service="razorpay",
            code="GATEWAY_ERROR",
            details={"gateway_error": gateway_error} if gateway_error else {},
        )


class GatewayNotConfiguredError(BillingError):
    """Raised when gateway credentials are missing from settings."""

    def __init__(self, setting: str):
        super().__init__(
            "Payment gateway is not configured",
            code="GATEWAY_NOT_CONFIGURED",
            details={"setting": setting},
        )
