"""
API test fixtures.

Builds the app with every service dependency overridden: a stub
Identity Store, and the real session, subscription, access and billing
services running over in-memory repositories.
"""

import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    get_access_guard,
    get_auth_service,
    get_billing_service,
    get_session_guard,
    get_subscription_service,
)
from modules.access import AccessGuard
from modules.billing.reconciler import PaymentReconciler
from modules.billing.service import BillingService
from modules.sessions.service import SessionGuard
from modules.subscriptions.service import SubscriptionService
from shared.config import Settings
from shared.models import AuthenticatedUser
from tests.fakes import (
    FakePaymentRepository,
    FakeSessionRepository,
    FakeSubscriptionRepository,
    StubAuthService,
)

WEBHOOK_SECRET = "whsec_api_test"
KEY_SECRET = "key_secret_api_test"
PASSWORD = "correct horse"


@pytest.fixture
def user() -> AuthenticatedUser:
    return AuthenticatedUser(id="u1", email="trader@example.com", email_verified=True)


@pytest.fixture
def auth(user) -> StubAuthService:
    auth = StubAuthService()
    auth.add_account(user, PASSWORD)
    return auth


@pytest.fixture
def session_repo(user) -> FakeSessionRepository:
    repo = FakeSessionRepository()
    repo.add_profile(user.id)
    return repo


@pytest.fixture
def subscription_repo() -> FakeSubscriptionRepository:
    return FakeSubscriptionRepository()


@pytest.fixture
def payment_repo() -> FakePaymentRepository:
    return FakePaymentRepository()


@pytest.fixture
def sessions(session_repo) -> SessionGuard:
    return SessionGuard(session_repo)


@pytest.fixture
def subscriptions(subscription_repo) -> SubscriptionService:
    return SubscriptionService(subscription_repo)


@pytest.fixture
def gateway() -> MagicMock:
    gateway = MagicMock()
    gateway.key_id = "rzp_test_key"
    gateway.create_order.return_value = {"id": "order_api_1", "amount": 299900, "currency": "INR"}
    return gateway


@pytest.fixture
def billing(payment_repo, subscriptions, gateway) -> BillingService:
    settings = Settings(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=KEY_SECRET,
        razorpay_webhook_secret=WEBHOOK_SECRET,
    )
    reconciler = PaymentReconciler(payment_repo, subscriptions, currency="INR")
    return BillingService(settings, payment_repo, reconciler, gateway)


@pytest.fixture
def app(auth, sessions, subscriptions, billing):
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: auth
    app.dependency_overrides[get_session_guard] = lambda: sessions
    app.dependency_overrides[get_subscription_service] = lambda: subscriptions
    app.dependency_overrides[get_access_guard] = lambda: AccessGuard(sessions, subscriptions)
    app.dependency_overrides[get_billing_service] = lambda: billing
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login(client):
    """Log in through the API and return the JSON body."""

    def _login(email: str = "trader@example.com", password: str = PASSWORD) -> dict:
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        # Each test picks its own transport (header or cookie)
        client.cookies.clear()
        return response.json()

    return _login


def session_headers(body: dict) -> dict[str, str]:
    """Bearer credential plus session header from a login response."""
    return {
        "Authorization": f"Bearer {body['access_token']}",
        "x-session-token": body["session_token"],
    }
