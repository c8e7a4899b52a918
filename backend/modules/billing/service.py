"""
Billing service implementation.

Hosts the two thin transport adapters in front of PaymentReconciler:
the asynchronous gateway webhook and the synchronous checkout callback.
"""

import logging
from typing import Optional

from shared.config import Settings
from shared.exceptions import StoreUnavailableError
from shared.models import AuthenticatedUser
from modules.subscriptions.models import Plan

from .events import parse_webhook_event
from .exceptions import (
    DataIntegrityAnomalyError,
    GatewayNotConfiguredError,
    InvalidPlanError,
    PaymentNotFoundError,
    ReconciliationTransientError,
    SignatureInvalidError,
    WebhookPayloadError,
)
from .gateway import RazorpayGateway
from .interfaces import IBillingService
from .models import (
    OrderResponse,
    PaymentCapturedEvent,
    ReconcileRequest,
    ReconcileResult,
    ReconcileSource,
    VerifyPaymentRequest,
    WebhookAck,
    plan_price,
)
from .reconciler import PaymentReconciler
from .repository import PaymentRepository
from .signatures import verify_payment_signature, verify_webhook_signature

logger = logging.getLogger(__name__)


def parse_plan(value: Optional[str]) -> Optional[Plan]:
    """Plan for a code, or None if it is missing or unknown."""
    if not value:
        return None
    try:
        return Plan(value)
    except ValueError:
        return None


class BillingService(IBillingService):
    """Billing service backed by Razorpay and the payments table."""

    def __init__(
        self,
        settings: Settings,
        payments: PaymentRepository,
        reconciler: PaymentReconciler,
        gateway: RazorpayGateway,
    ):
        self._settings = settings
        self._payments = payments
        self._reconciler = reconciler
        self._gateway = gateway

    async def create_order(self, user: AuthenticatedUser, plan: str) -> OrderResponse:
        selected = parse_plan(plan)
        if selected is None:
            raise InvalidPlanError(plan)

        price = plan_price(selected)
        currency = self._settings.razorpay_currency
        order = self._gateway.create_order(
            amount_minor=price * 100,
            currency=currency,
            notes={"user_id": user.id, "plan": selected.value},
        )

        self._payments.create_pending(
            user_id=user.id,
            order_id=order["id"],
            plan=selected,
            amount=price,
            currency=currency,
        )
        logger.info(f"Opened order {order['id']} for user {user.id}: plan={selected.value}")

        return OrderResponse(
            order_id=order["id"],
            amount=order.get("amount", price * 100),
            currency=order.get("currency", currency),
            plan=selected,
            key_id=self._gateway.key_id,
        )

    async def verify_client_payment(
        self,
        user: AuthenticatedUser,
        request: VerifyPaymentRequest,
    ) -> ReconcileResult:
        secret = self._settings.razorpay_key_secret
        if not secret:
            raise GatewayNotConfiguredError("razorpay_key_secret")

        try:
            payment = self._payments.get_by_order_id(request.gateway_order_id)
        except StoreUnavailableError as e:
            raise ReconciliationTransientError(request.gateway_order_id, e.code)

        if payment is None or payment.user_id != user.id:
            raise PaymentNotFoundError(request.gateway_order_id)

        if not verify_payment_signature(
            request.gateway_order_id,
            request.gateway_payment_id,
            request.gateway_signature,
            secret,
        ):
            logger.warning(
                f"Invalid checkout signature for order {request.gateway_order_id} "
                f"(payment {request.gateway_payment_id}, user {user.id})"
            )
            try:
                self._payments.mark_failed(request.gateway_order_id, request.gateway_payment_id)
            except StoreUnavailableError as e:
                logger.error(
                    f"Could not mark order {request.gateway_order_id} failed: {e.message}"
                )
            raise SignatureInvalidError("client", request.gateway_order_id)

        return await self._reconciler.reconcile(
            ReconcileRequest(
                order_id=request.gateway_order_id,
                payment_id=request.gateway_payment_id,
                signature=request.gateway_signature,
                user_id=user.id,
                plan=payment.plan,
                source=ReconcileSource.CLIENT,
            )
        )

    async def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> WebhookAck:
        secret = self._settings.razorpay_webhook_secret
        if not secret:
            logger.error("Webhook received but RAZORPAY_WEBHOOK_SECRET is not configured")
            return WebhookAck(outcome="not_configured")

        if not verify_webhook_signature(raw_body, signature, secret):
            logger.warning("Rejected webhook with invalid signature")
            return WebhookAck(outcome="invalid_signature")

        try:
            event = parse_webhook_event(raw_body)
        except WebhookPayloadError as e:
            logger.warning(f"Rejected webhook: {e.message}")
            return WebhookAck(outcome="invalid_payload")

        if not isinstance(event, PaymentCapturedEvent):
            logger.debug(f"Ignoring webhook event {event.event}")
            return WebhookAck(outcome="ignored")

        entity = event.payment
        request = ReconcileRequest(
            order_id=entity.order_id,
            payment_id=entity.id,
            signature=entity.signature,
            user_id=entity.notes.user_id,
            plan=parse_plan(entity.notes.plan),
            source=ReconcileSource.WEBHOOK,
        )

        try:
            result = await self._reconciler.reconcile(request)
        except DataIntegrityAnomalyError:
            return WebhookAck(outcome="anomaly")
        except ReconciliationTransientError:
            # Claim was released; a later delivery or checkout callback completes it
            return WebhookAck(outcome="transient")
        except Exception:
            logger.exception(f"Unexpected error reconciling webhook for order {entity.order_id}")
            return WebhookAck(outcome="error")

        return WebhookAck(outcome=result.outcome.value)
