"""
Payment repository for database access.

The payments table is unique on razorpay_order_id. Status transitions
to completed go through a single conditional UPDATE, which is the
serialization point between the webhook and client-callback paths.
"""

from typing import Any, Optional

from shared.repository import BaseRepository, utc_now
from modules.subscriptions.models import Plan

from .models import Payment, PaymentStatus


class PaymentRepository(BaseRepository[Payment]):
    """
    Repository for payment rows.

    Note: Rows are never deleted. Only the reconciler moves a row to
    completed, and only a bad client signature moves one to failed.
    """

    def create_pending(
        self,
        user_id: str,
        order_id: str,
        plan: Plan,
        amount: int,
        currency: str,
    ) -> Payment:
        """
        Record a freshly opened order.

        Args:
            user_id: Identity that opened the order.
            order_id: Gateway order id.
            plan: Plan being bought.
            amount: Amount in whole currency units.
            currency: ISO currency code.

        Returns:
            The created pending Payment.
        """
        now = utc_now().isoformat()
        data = {
            "user_id": user_id,
            "razorpay_order_id": order_id,
            "plan": Plan(plan).value,
            "amount": amount,
            "currency": currency,
            "status": PaymentStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        }
        result = self._execute(
            "payments.create_pending",
            self._db.table("payments").insert(data),
        )
        return self._map_to_payment(result.data[0])

    def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        """Get a payment by gateway order id."""
        result = self._execute(
            "payments.get_by_order_id",
            self._db.table("payments").select("*").eq("razorpay_order_id", order_id).limit(1),
        )
        if not result.data:
            return None
        return self._map_to_payment(result.data[0])

    def claim_completion(
        self,
        order_id: str,
        payment_id: str,
        signature: Optional[str],
    ) -> Optional[Payment]:
        """
        Atomically move a not-yet-completed payment to completed.

        A single UPDATE ... WHERE status <> 'completed' RETURNING *, so
        of any number of concurrent callers exactly one gets a row back.

        Returns:
            The completed Payment if this call made the transition,
            None if the payment was already completed (or is unknown).
        """
        data: dict[str, Any] = {
            "status": PaymentStatus.COMPLETED.value,
            "razorpay_payment_id": payment_id,
            "updated_at": utc_now().isoformat(),
        }
        if signature:
            data["razorpay_signature"] = signature

        result = self._execute(
            "payments.claim_completion",
            self._db.table("payments")
            .update(data)
            .eq("razorpay_order_id", order_id)
            .neq("status", PaymentStatus.COMPLETED.value),
        )
        if not result.data:
            return None
        return self._map_to_payment(result.data[0])

    def insert_completed(
        self,
        user_id: str,
        order_id: str,
        payment_id: str,
        signature: Optional[str],
        plan: Plan,
        amount: int,
        currency: str,
    ) -> Payment:
        """
        Materialize a completed row for a capture whose order row is missing.

        Raises:
            APIError: With code 23505 if another path inserted the row first.
        """
        now = utc_now().isoformat()
        data = {
            "user_id": user_id,
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
            "plan": Plan(plan).value,
            "amount": amount,
            "currency": currency,
            "status": PaymentStatus.COMPLETED.value,
            "created_at": now,
            "updated_at": now,
        }
        result = self._execute(
            "payments.insert_completed",
            self._db.table("payments").insert(data),
        )
        return self._map_to_payment(result.data[0])

    def mark_failed(self, order_id: str, payment_id: str) -> Optional[Payment]:
        """
        Mark a pending payment failed after a bad client signature.

        Guarded on status=pending so a completed payment is never downgraded.
        """
        result = self._execute(
            "payments.mark_failed",
            self._db.table("payments")
            .update({
                "status": PaymentStatus.FAILED.value,
                "razorpay_payment_id": payment_id,
                "updated_at": utc_now().isoformat(),
            })
            .eq("razorpay_order_id", order_id)
            .eq("status", PaymentStatus.PENDING.value),
        )
        if not result.data:
            return None
        return self._map_to_payment(result.data[0])

    def release_claim(
        self,
        order_id: str,
        payment_id: str,
        previous_status: PaymentStatus,
    ) -> bool:
        """
        Undo a completion claim whose entitlement step failed.

        Only reverts the row this invocation completed (matching payment id),
        so a redelivery can claim it again.

        Returns:
            True if the row was reverted.
        """
        result = self._execute(
            "payments.release_claim",
            self._db.table("payments")
            .update({
                "status": PaymentStatus(previous_status).value,
                "updated_at": utc_now().isoformat(),
            })
            .eq("razorpay_order_id", order_id)
            .eq("razorpay_payment_id", payment_id)
            .eq("status", PaymentStatus.COMPLETED.value),
        )
        return bool(result.data)

    def _map_to_payment(self, data: dict[str, Any]) -> Payment:
        """Map database row to Payment model."""
        return Payment(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            razorpay_order_id=data["razorpay_order_id"],
            razorpay_payment_id=data.get("razorpay_payment_id"),
            razorpay_signature=data.get("razorpay_signature"),
            plan=Plan(data["plan"]),
            amount=int(data["amount"]),
            currency=data.get("currency") or "INR",
            status=PaymentStatus(data["status"]),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
