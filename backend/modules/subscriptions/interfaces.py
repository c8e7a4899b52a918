"""
Subscription module interface.

The billing module credits purchases through ISubscriptionService and the
access layer reads entitlement through it.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import Plan, Subscription, SubscriptionDetails


@runtime_checkable
class ISubscriptionService(Protocol):
    """Interface for subscription reads and plan activation."""

    async def get_active_subscription(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[Subscription]:
        """
        Get the identity's subscription if it is active right now.

        Active-ness is recomputed from end_date, never trusted from the
        stored status alone.

        Raises:
            StoreUnavailableError: If the lookup fails.
        """
        ...

    async def get_details(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> SubscriptionDetails:
        """
        Build the subscription-details view for an identity.

        Raises:
            StoreUnavailableError: If the lookup fails.
        """
        ...

    async def apply_plan(
        self,
        user_id: str,
        plan: Plan,
        now: Optional[datetime] = None,
        order_id: Optional[str] = None,
    ) -> Subscription:
        """
        Create, replace or extend the identity's subscription for one purchase.

        With an order_id the call is idempotent: a row that already lists
        the order is returned unchanged. Without one, callers must make
        sure each purchase reaches this at most once.

        Raises:
            SubscriptionConflictError: If concurrent writers kept winning.
            StoreUnavailableError: If the store fails.
        """
        ...
