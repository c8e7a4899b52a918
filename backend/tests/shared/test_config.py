"""Tests for shared/config.py."""

from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()
        assert settings.app_name == "PivotDesk API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.razorpay_currency == "INR"
        assert settings.session_cookie_name == "session_token"
        assert settings.session_cookie_max_age == 86400
        assert settings.session_cookie_cross_site is False
        assert settings.store_timeout_seconds == 10
        assert settings.subscription_update_attempts == 3

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings()
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_razorpay_config_from_env(self):
        """Settings should load gateway secrets from environment variables."""
        with patch.dict(os.environ, {
            "RAZORPAY_KEY_ID": "rzp_test_key",
            "RAZORPAY_KEY_SECRET": "key-secret",
            "RAZORPAY_WEBHOOK_SECRET": "hook-secret",
        }):
            settings = Settings()
            assert settings.razorpay_key_id == "rzp_test_key"
            assert settings.razorpay_key_secret == "key-secret"
            assert settings.razorpay_webhook_secret == "hook-secret"

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
            "SUPABASE_JWT_SECRET": "jwt-secret",
        }):
            settings = Settings()
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"
            assert settings.supabase_service_role_key == "test-service-key"
            assert settings.supabase_jwt_secret == "jwt-secret"

    def test_cross_site_cookie_flag(self):
        """Embedded deployments flip the cookie to cross-site."""
        with patch.dict(os.environ, {"SESSION_COOKIE_CROSS_SITE": "true"}):
            assert Settings().session_cookie_cross_site is True


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
