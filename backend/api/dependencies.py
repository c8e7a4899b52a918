"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Routes only ever see the interfaces, so tests swap implementations via
app.dependency_overrides on the get_* functions below.
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.access.service import AccessGuard
    from modules.auth.interfaces import IAuthService
    from modules.billing.gateway import RazorpayGateway
    from modules.billing.interfaces import IBillingService
    from modules.billing.reconciler import PaymentReconciler
    from modules.billing.repository import PaymentRepository
    from modules.sessions.interfaces import ISessionGuard
    from modules.subscriptions.interfaces import ISubscriptionService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._db: "Client | None" = None
        self._auth_service: "IAuthService | None" = None
        self._session_guard: "ISessionGuard | None" = None
        self._subscription_service: "ISubscriptionService | None" = None
        self._payment_repository: "PaymentRepository | None" = None
        self._reconciler: "PaymentReconciler | None" = None
        self._gateway: "RazorpayGateway | None" = None
        self._billing_service: "IBillingService | None" = None
        self._access_guard: "AccessGuard | None" = None

    @property
    def db(self) -> "Client":
        """Get the service-role Supabase client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client()
        return self._db

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    @property
    def sessions(self) -> "ISessionGuard":
        """Get the session guard instance."""
        if self._session_guard is None:
            from modules.sessions.repository import SessionRepository
            from modules.sessions.service import SessionGuard
            self._session_guard = SessionGuard(SessionRepository(self.db))
        return self._session_guard

    @property
    def subscriptions(self) -> "ISubscriptionService":
        """Get the subscription service instance."""
        if self._subscription_service is None:
            from modules.subscriptions.repository import SubscriptionRepository
            from modules.subscriptions.service import SubscriptionService
            self._subscription_service = SubscriptionService(
                SubscriptionRepository(self.db),
                max_attempts=get_settings().subscription_update_attempts,
            )
        return self._subscription_service

    @property
    def payment_repository(self) -> "PaymentRepository":
        """Get the payment repository instance."""
        if self._payment_repository is None:
            from modules.billing.repository import PaymentRepository
            self._payment_repository = PaymentRepository(self.db)
        return self._payment_repository

    @property
    def reconciler(self) -> "PaymentReconciler":
        """Get the payment reconciler instance."""
        if self._reconciler is None:
            from modules.billing.reconciler import PaymentReconciler
            self._reconciler = PaymentReconciler(
                payments=self.payment_repository,
                subscriptions=self.subscriptions,
                currency=get_settings().razorpay_currency,
            )
        return self._reconciler

    @property
    def gateway(self) -> "RazorpayGateway":
        """Get the Razorpay gateway instance."""
        if self._gateway is None:
            from modules.billing.gateway import RazorpayGateway
            settings = get_settings()
            self._gateway = RazorpayGateway(
                key_id=settings.razorpay_key_id,
                key_secret=settings.razorpay_key_secret,
                timeout_seconds=settings.store_timeout_seconds,
            )
        return self._gateway

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            self._billing_service = BillingService(
                settings=get_settings(),
                payments=self.payment_repository,
                reconciler=self.reconciler,
                gateway=self.gateway,
            )
        return self._billing_service

    @property
    def access(self) -> "AccessGuard":
        """Get the access guard instance."""
        if self._access_guard is None:
            from modules.access.service import AccessGuard
            self._access_guard = AccessGuard(
                sessions=self.sessions,
                subscriptions=self.subscriptions,
            )
        return self._access_guard

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._db = None
        self._auth_service = None
        self._session_guard = None
        self._subscription_service = None
        self._payment_repository = None
        self._reconciler = None
        self._gateway = None
        self._billing_service = None
        self._access_guard = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_session_guard() -> "ISessionGuard":
    """FastAPI dependency for session guard."""
    return get_container().sessions


def get_subscription_service() -> "ISubscriptionService":
    """FastAPI dependency for subscription service."""
    return get_container().subscriptions


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing


def get_access_guard() -> "AccessGuard":
    """FastAPI dependency for access guard."""
    return get_container().access
