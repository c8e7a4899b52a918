"""
Subscription module exceptions.
"""

from shared.exceptions import PivotDeskError


class SubscriptionError(PivotDeskError):
    """Base exception for subscription-related errors."""

    pass


class SubscriptionConflictError(SubscriptionError):
    """
    Raised when concurrent writers kept winning the compare-and-set.

    Transient: the same reconciliation can be retried.
    """

    def __init__(self, user_id: str, attempts: int):
        super().__init__(
            f"Subscription for {user_id} changed concurrently {attempts} times",
            code="SUBSCRIPTION_CONFLICT",
            details={"user_id": user_id, "attempts": attempts},
        )
