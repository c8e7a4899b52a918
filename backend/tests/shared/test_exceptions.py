"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    PivotDeskError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    StoreUnavailableError,
)


class TestPivotDeskError:
    def test_message(self):
        """PivotDeskError should store message."""
        error = PivotDeskError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """PivotDeskError should default code to class name."""
        assert PivotDeskError("Test error").code == "PivotDeskError"

    def test_custom_code(self):
        """PivotDeskError should accept custom code."""
        assert PivotDeskError("Test error", code="CUSTOM_ERROR").code == "CUSTOM_ERROR"

    def test_details_default_empty(self):
        """Details should default to an empty dict."""
        assert PivotDeskError("Test error").details == {}


class TestSubclasses:
    def test_all_inherit_base(self):
        """Every shared error is a PivotDeskError."""
        for cls in (NotFoundError, ValidationError, AuthenticationError, AuthorizationError):
            assert isinstance(cls("x"), PivotDeskError)

    def test_external_service_error_records_service(self):
        """ExternalServiceError should add the service to details."""
        error = ExternalServiceError("down", service="razorpay", code="GATEWAY_ERROR")
        assert error.service == "razorpay"
        assert error.details["service"] == "razorpay"
        assert error.code == "GATEWAY_ERROR"

    def test_module_errors_specialise_shared_bases(self):
        """Each shared base is the parent of at least one module error."""
        from modules.access.exceptions import AccessDeniedError
        from modules.auth.exceptions import IdentityServiceError, InvalidTokenError
        from modules.billing.exceptions import InvalidPlanError, PaymentNotFoundError

        assert issubclass(PaymentNotFoundError, NotFoundError)
        assert issubclass(InvalidPlanError, ValidationError)
        assert issubclass(InvalidTokenError, AuthenticationError)
        assert issubclass(AccessDeniedError, AuthorizationError)
        assert issubclass(IdentityServiceError, ExternalServiceError)


class TestStoreUnavailableError:
    def test_code_and_operation(self):
        """StoreUnavailableError should carry a stable code and the operation."""
        error = StoreUnavailableError("payments.claim_completion", "timeout")
        assert isinstance(error, ExternalServiceError)
        assert error.code == "STORE_UNAVAILABLE"
        assert error.operation == "payments.claim_completion"
        assert error.details["reason"] == "timeout"
        assert error.details["service"] == "supabase"

    def test_reason_optional(self):
        """Reason should be omitted from details when not given."""
        error = StoreUnavailableError("profiles.get")
        assert "reason" not in error.details
