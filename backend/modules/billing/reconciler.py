"""
Payment Reconciler.

Turns a verified "payment captured" fact into exactly one entitlement
change, no matter how often or via which path (webhook or checkout
callback) the fact arrives. Signature checks happen in the transport
adapters (see service.py) before anything reaches reconcile().

Protocol:
1. Look the payment up by gateway order id.
2. Already completed: nothing to do, the first completion owns the credit.
3. Missing: materialize it as completed from the claimed identity/plan,
   or give up if those are unknown.
4. Otherwise claim it with a conditional update; losing the claim means
   another invocation owns the credit.
5. The owner applies the plan to the subscription, recording the order
   on the subscription row in the same write. If that fails transiently
   the claim is released so a redelivery can redo steps 4-5; a write that
   committed before the failure is recognised by its order id and is not
   applied again.
"""

import logging
from typing import Optional

from postgrest.exceptions import APIError

from shared.exceptions import StoreUnavailableError
from shared.repository import is_unique_violation
from modules.subscriptions.exceptions import SubscriptionConflictError
from modules.subscriptions.interfaces import ISubscriptionService

from .exceptions import DataIntegrityAnomalyError, ReconciliationTransientError
from .models import (
    Payment,
    PaymentStatus,
    ReconcileOutcome,
    ReconcileRequest,
    ReconcileResult,
    plan_price,
)
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class PaymentReconciler:
    """The single place where captured payments become entitlements."""

    def __init__(
        self,
        payments: PaymentRepository,
        subscriptions: ISubscriptionService,
        currency: str = "INR",
    ):
        self._payments = payments
        self._subscriptions = subscriptions
        self._currency = currency

    async def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """
        Reconcile one captured payment.

        Args:
            request: A captured-payment fact whose signature was verified.

        Returns:
            ReconcileResult; APPLIED only for the one invocation that
            credited the subscription.

        Raises:
            DataIntegrityAnomalyError: No payment row and no identity/plan.
            ReconciliationTransientError: The store failed; safe to retry.
        """
        try:
            return await self._reconcile(request)
        except StoreUnavailableError as e:
            logger.warning(
                f"Transient failure reconciling order {request.order_id} "
                f"({request.source.value}): {e.message}"
            )
            raise ReconciliationTransientError(request.order_id, e.code)

    async def _reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        payment = self._payments.get_by_order_id(request.order_id)

        if payment is not None and payment.status == PaymentStatus.COMPLETED:
            logger.info(
                f"Order {request.order_id} already completed; "
                f"skipping duplicate {request.source.value} delivery"
            )
            return ReconcileResult(outcome=ReconcileOutcome.ALREADY_APPLIED, payment=payment)

        if payment is None:
            claimed, previous_status = self._materialize(request), PaymentStatus.PENDING
        else:
            self._check_claimed_identity(request, payment)
            claimed = self._payments.claim_completion(
                request.order_id, request.payment_id, request.signature
            )
            previous_status = payment.status

        if claimed is None:
            current = self._payments.get_by_order_id(request.order_id) or payment
            if current is None:
                raise DataIntegrityAnomalyError(request.order_id, "payment row disappeared")
            logger.info(
                f"Order {request.order_id} was completed concurrently; "
                f"{request.source.value} delivery makes no change"
            )
            return ReconcileResult(outcome=ReconcileOutcome.ALREADY_APPLIED, payment=current)

        try:
            subscription = await self._subscriptions.apply_plan(
                claimed.user_id, claimed.plan, order_id=claimed.razorpay_order_id
            )
        except (StoreUnavailableError, SubscriptionConflictError) as e:
            self._release(claimed, previous_status)
            raise ReconciliationTransientError(request.order_id, e.code)

        logger.info(
            f"Reconciled order {request.order_id} via {request.source.value}: "
            f"user={claimed.user_id} plan={claimed.plan.value} "
            f"end_date={subscription.end_date.isoformat()}"
        )
        return ReconcileResult(
            outcome=ReconcileOutcome.APPLIED,
            payment=claimed,
            subscription=subscription,
        )

    def _materialize(self, request: ReconcileRequest) -> Optional[Payment]:
        """Create a completed row for a capture that arrived before its order row."""
        if not request.user_id or request.plan is None:
            logger.error(
                f"Manual reconciliation required: captured order {request.order_id} "
                f"(payment {request.payment_id}) has no payment row and no identity/plan"
            )
            raise DataIntegrityAnomalyError(request.order_id, "no payment row and no identity/plan")

        logger.warning(
            f"No payment row for captured order {request.order_id}; "
            f"recovering from event for user {request.user_id}"
        )
        try:
            return self._payments.insert_completed(
                user_id=request.user_id,
                order_id=request.order_id,
                payment_id=request.payment_id,
                signature=request.signature,
                plan=request.plan,
                amount=plan_price(request.plan),
                currency=self._currency,
            )
        except APIError as e:
            if not is_unique_violation(e):
                raise
            return None

    def _check_claimed_identity(self, request: ReconcileRequest, payment: Payment) -> None:
        """The stored row decides who is credited; log when the event disagrees."""
        if request.user_id and request.user_id != payment.user_id:
            logger.warning(
                f"Order {request.order_id} notes name user {request.user_id} "
                f"but the payment row belongs to {payment.user_id}; crediting the row owner"
            )
        if request.plan is not None and request.plan != payment.plan:
            logger.warning(
                f"Order {request.order_id} notes name plan {request.plan.value} "
                f"but the payment row has {payment.plan.value}; using the row"
            )

    def _release(self, claimed: Payment, previous_status: PaymentStatus) -> None:
        """Hand the claim back after a failed entitlement step."""
        payment_id = claimed.razorpay_payment_id or ""
        try:
            released = self._payments.release_claim(
                claimed.razorpay_order_id, payment_id, previous_status
            )
        except StoreUnavailableError:
            released = False

        if not released:
            logger.error(
                f"Manual reconciliation required: order {claimed.razorpay_order_id} "
                f"is completed but its subscription was not updated"
            )
