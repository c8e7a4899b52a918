"""
Base exception classes for the PivotDesk backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class PivotDeskError(Exception):
    """
    Base exception for all PivotDesk errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class NotFoundError(PivotDeskError):
    """Resource not found."""

    pass


class ValidationError(PivotDeskError):
    """Input validation failed."""

    pass


class AuthenticationError(PivotDeskError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(PivotDeskError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(PivotDeskError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class StoreUnavailableError(ExternalServiceError):
    """
    The entitlement store could not be reached or timed out.

    Treated as transient: callers may retry the same operation.
    """

    def __init__(self, operation: str, reason: Optional[str] = None):
        super().__init__(
            f"Entitlement store unavailable during {operation}",
            service="supabase",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "reason": reason} if reason else {"operation": operation},
        )
        self.operation = operation
