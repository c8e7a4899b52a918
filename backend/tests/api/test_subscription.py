"""Tests for subscription endpoints."""

from datetime import datetime, timedelta, timezone

from tests.api.conftest import session_headers


def add_subscription(subscription_repo, days_left: float):
    now = datetime.now(timezone.utc)
    return subscription_repo.add("u1", now - timedelta(days=3), now + timedelta(days=days_left))


class TestDetails:
    def test_active(self, client, login, subscription_repo):
        headers = session_headers(login())
        sub = add_subscription(subscription_repo, days_left=10)

        response = client.get("/api/subscription/details", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["active"] is True
        assert data["remainingDays"] == 10
        assert data["subscription"]["id"] == sub.id

    def test_partial_day_rounds_up(self, client, login, subscription_repo):
        headers = session_headers(login())
        add_subscription(subscription_repo, days_left=0.25)

        response = client.get("/api/subscription/details", headers=headers)

        assert response.json()["remainingDays"] == 1

    def test_expired_reads_inactive(self, client, login, subscription_repo):
        headers = session_headers(login())
        add_subscription(subscription_repo, days_left=-2)

        data = client.get("/api/subscription/details", headers=headers).json()

        assert data["active"] is False
        assert data["remainingDays"] == 0
        assert data["subscription"] is None

    def test_requires_session(self, client):
        response = client.get("/api/subscription/details")
        assert response.status_code == 401

    def test_store_failure(self, client, login, subscription_repo):
        headers = session_headers(login())
        subscription_repo.fail_on.add("subscriptions.get_by_user")

        response = client.get("/api/subscription/details", headers=headers)

        assert response.status_code == 503


class TestStatus:
    def test_anonymous_is_inactive(self, client):
        response = client.get("/api/subscription/status")

        assert response.status_code == 200
        assert response.json() == {"active": False}

    def test_active(self, client, auth, user, subscription_repo):
        add_subscription(subscription_repo, days_left=5)
        access_token = auth.grant(user)

        response = client.get(
            "/api/subscription/status",
            headers={"Authorization": f"Bearer {access_token}"},
        )

        assert response.json() == {"active": True}

    def test_store_failure_reads_inactive(self, client, auth, user, subscription_repo):
        add_subscription(subscription_repo, days_left=5)
        subscription_repo.fail_on.add("subscriptions.get_by_user")
        access_token = auth.grant(user)

        response = client.get(
            "/api/subscription/status",
            headers={"Authorization": f"Bearer {access_token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"active": False}
