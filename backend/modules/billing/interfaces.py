"""
Billing module interface.

The payment routes depend on IBillingService, not the concrete
implementation. Both capture entry points funnel into the same
PaymentReconciler behind this interface.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import OrderResponse, ReconcileResult, VerifyPaymentRequest, WebhookAck


@runtime_checkable
class IBillingService(Protocol):
    """Interface for order creation and payment capture handling."""

    async def create_order(self, user: AuthenticatedUser, plan: str) -> OrderResponse:
        """
        Open a gateway order and record it as a pending payment.

        Args:
            user: The identity buying the plan.
            plan: Requested plan code.

        Returns:
            OrderResponse for the client checkout widget.

        Raises:
            InvalidPlanError: If the plan is unknown.
            GatewayNotConfiguredError: If gateway credentials are missing.
            GatewayError: If the gateway fails.
            StoreUnavailableError: If the pending row cannot be written.
        """
        ...

    async def verify_client_payment(
        self,
        user: AuthenticatedUser,
        request: VerifyPaymentRequest,
    ) -> ReconcileResult:
        """
        Handle the checkout callback for one of the caller's orders.

        Raises:
            PaymentNotFoundError: If the order is not the caller's.
            SignatureInvalidError: If the signature does not verify; the
                payment is marked failed.
            ReconciliationTransientError: If the store failed.
            GatewayNotConfiguredError: If the key secret is missing.
        """
        ...

    async def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> WebhookAck:
        """
        Handle a gateway webhook delivery.

        Never raises: every failure is logged and acknowledged so the
        gateway does not retry garbage forever.
        """
        ...
