"""
Subscriptions module.

Owns the subscriptions table: plan arithmetic, active-ness checks and
the create / replace / extend write used when a payment is captured.

Public API:
- ISubscriptionService: Interface for subscription operations
- Plan, Subscription, SubscriptionStatus, SubscriptionDetails: Models
- plan_duration, compute_entitlement: Pure plan arithmetic
"""

from .interfaces import ISubscriptionService
from .models import (
    Plan,
    Subscription,
    SubscriptionStatus,
    SubscriptionDetails,
    EntitlementChange,
)
from .plans import plan_duration, add_plan_duration, compute_entitlement
from .exceptions import (
    SubscriptionError,
    SubscriptionConflictError,
)

__all__ = [
    # Interface
    "ISubscriptionService",
    # Models
    "Plan",
    "Subscription",
    "SubscriptionStatus",
    "SubscriptionDetails",
    "EntitlementChange",
    # Plan arithmetic
    "plan_duration",
    "add_plan_duration",
    "compute_entitlement",
    # Exceptions
    "SubscriptionError",
    "SubscriptionConflictError",
]
