"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

import logging
from datetime import datetime, timezone
from typing import Any, TypeVar, Generic

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Postgres error code raised by a unique constraint
UNIQUE_VIOLATION = "23505"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute() to run a PostgREST query and map transport failures
      to StoreUnavailableError

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class PaymentRepository(BaseRepository[Payment]):
            def get_by_order_id(self, order_id: str) -> Optional[Payment]:
                result = self._execute(
                    "payments.get_by_order_id",
                    self._db.table("payments").select("*").eq("razorpay_order_id", order_id),
                )
                if not result.data:
                    return None
                return self._map_to_payment(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, operation: str, query: Any) -> Any:
        """
        Execute a query builder, wrapping store failures.

        Unique-constraint violations are re-raised untouched so callers
        can treat them as a lost race rather than an outage.

        Args:
            operation: Name used in logs and error details.
            query: A PostgREST request builder.

        Returns:
            The PostgREST APIResponse.

        Raises:
            APIError: On a unique violation.
            StoreUnavailableError: On any other store or transport failure.
        """
        try:
            return query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise
            logger.warning(f"Store error during {operation}: {e.message}")
            raise StoreUnavailableError(operation, e.message) from e
        except httpx.HTTPError as e:
            logger.warning(f"Store transport failure during {operation}: {e!r}")
            raise StoreUnavailableError(operation, type(e).__name__) from e


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def is_unique_violation(error: APIError) -> bool:
    """Whether a PostgREST error came from a unique constraint."""
    return error.code == UNIQUE_VIOLATION
