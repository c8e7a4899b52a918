import pytest
from types import SimpleNamespace
from unittest.mock import patch, MagicMock
import jwt
from datetime import datetime, timedelta, timezone

from supabase import AuthApiError

from modules.auth.service import AuthService
from modules.auth.exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    IdentityServiceError,
)


def auth_api_error(status: int) -> AuthApiError:
    # Constructor arguments differ across supabase-auth releases
    error = AuthApiError.__new__(AuthApiError)
    error.message = "Invalid login credentials"
    error.status = status
    return error


def token_payload(**overrides) -> dict:
    payload = {
        "sub": "user-123",
        "email": "test@example.com",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        "iat": datetime.now(timezone.utc),
        "aud": "authenticated",
        "role": "authenticated",
    }
    payload.update(overrides)
    return payload


class TestValidateToken:
    @pytest.fixture
    def service(self):
        """Create auth service with mocked dependencies."""
        with patch("modules.auth.service.get_settings") as mock_settings:
            mock_settings.return_value.supabase_jwt_secret = "test-secret"
            yield AuthService()

    @pytest.mark.asyncio
    async def test_validate_valid_token(self, service):
        """Should validate a valid token and return user."""
        token = jwt.encode(token_payload(), "test-secret", algorithm="HS256")
        user = await service.validate_token(token)
        assert user.id == "user-123"
        assert user.email == "test@example.com"
        assert user.role == "user"

    @pytest.mark.asyncio
    async def test_validate_expired_token(self, service):
        """Should raise ExpiredTokenError for expired token."""
        token = jwt.encode(
            token_payload(
                exp=datetime.now(timezone.utc) - timedelta(hours=1),
                iat=datetime.now(timezone.utc) - timedelta(hours=2),
            ),
            "test-secret",
            algorithm="HS256",
        )
        with pytest.raises(ExpiredTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    async def test_validate_invalid_token(self, service):
        """Should raise InvalidTokenError for malformed token."""
        with pytest.raises(InvalidTokenError):
            await service.validate_token("not-a-valid-token")

    @pytest.mark.asyncio
    async def test_validate_missing_token(self, service):
        """Should raise MissingTokenError for empty token."""
        with pytest.raises(MissingTokenError):
            await service.validate_token("")

    @pytest.mark.asyncio
    async def test_validate_wrong_secret(self, service):
        """Should raise InvalidTokenError for token signed with wrong secret."""
        token = jwt.encode(token_payload(), "wrong-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    async def test_validate_wrong_audience(self, service):
        """Should raise InvalidTokenError for token with wrong audience."""
        token = jwt.encode(token_payload(aud="wrong-audience"), "test-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    async def test_validate_token_without_email(self, service):
        """Identities without an email cannot hold a session."""
        token = jwt.encode(token_payload(email=None), "test-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            await service.validate_token(token)

    @pytest.mark.asyncio
    async def test_validate_without_configured_secret(self):
        """An unconfigured secret must never accept tokens."""
        with patch("modules.auth.service.get_settings") as mock_settings:
            mock_settings.return_value.supabase_jwt_secret = ""
            service = AuthService()
        token = jwt.encode(token_payload(), "anything", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            await service.validate_token(token)


class TestSignIn:
    @pytest.fixture
    def anon_client(self):
        with patch("modules.auth.service.get_settings"), \
             patch("modules.auth.service.get_supabase_anon_client") as mock_factory:
            client = MagicMock()
            mock_factory.return_value = client
            yield client

    @pytest.mark.asyncio
    async def test_sign_in_returns_credentials(self, anon_client):
        """A successful sign-in returns the identity and its tokens."""
        anon_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=SimpleNamespace(
                id="user-123",
                email="test@example.com",
                email_confirmed_at=datetime.now(timezone.utc),
                last_sign_in_at=datetime.now(timezone.utc),
            ),
            session=SimpleNamespace(access_token="access", refresh_token="refresh"),
        )

        result = await AuthService().sign_in_with_password("test@example.com", "pw")

        anon_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "test@example.com", "password": "pw"}
        )
        assert result.user.id == "user-123"
        assert result.user.email_verified is True
        assert result.access_token == "access"
        assert result.refresh_token == "refresh"

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, anon_client):
        """A 4xx from the identity store means bad credentials."""
        anon_client.auth.sign_in_with_password.side_effect = auth_api_error(400)

        with pytest.raises(InvalidCredentialsError):
            await AuthService().sign_in_with_password("test@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_identity_store_outage(self, anon_client):
        """A 5xx is an outage, not a credential problem."""
        anon_client.auth.sign_in_with_password.side_effect = auth_api_error(503)

        with pytest.raises(IdentityServiceError):
            await AuthService().sign_in_with_password("test@example.com", "pw")

    @pytest.mark.asyncio
    async def test_missing_session_is_rejected(self, anon_client):
        """No session in the response (e.g. unconfirmed email) fails the login."""
        anon_client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)

        with pytest.raises(InvalidCredentialsError):
            await AuthService().sign_in_with_password("test@example.com", "pw")


class TestRevoke:
    @pytest.fixture
    def admin_client(self):
        with patch("modules.auth.service.get_settings"), \
             patch("modules.auth.service.get_supabase_client") as mock_factory:
            client = MagicMock()
            mock_factory.return_value = client
            yield client

    @pytest.mark.asyncio
    async def test_revokes_local_scope_by_default(self, admin_client):
        """Only the presented credential is signed out."""
        assert await AuthService().revoke("access-token") is True
        admin_client.auth.admin.sign_out.assert_called_once_with("access-token", "local")

    @pytest.mark.asyncio
    async def test_revoke_never_raises(self, admin_client):
        """Revocation failures are reported, not raised."""
        admin_client.auth.admin.sign_out.side_effect = auth_api_error(500)
        assert await AuthService().revoke("access-token") is False

    @pytest.mark.asyncio
    async def test_revoke_without_token(self, admin_client):
        assert await AuthService().revoke("") is False
        admin_client.auth.admin.sign_out.assert_not_called()
