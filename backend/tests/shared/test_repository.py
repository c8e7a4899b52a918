"""Tests for shared/repository.py."""

from datetime import timezone
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from shared.exceptions import StoreUnavailableError
from shared.repository import BaseRepository, is_unique_violation, utc_now


def api_error(code: str) -> APIError:
    return APIError({"code": code, "message": f"error {code}", "details": None, "hint": None})


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_execute_returns_response(self):
        """Should return whatever the query builder returns."""
        query = MagicMock()
        query.execute.return_value.data = [{"id": "1"}]

        result = BaseRepository(MagicMock())._execute("test.op", query)

        assert result.data == [{"id": "1"}]

    def test_execute_passes_unique_violation_through(self):
        """Unique violations are a lost race, not an outage."""
        query = MagicMock()
        query.execute.side_effect = api_error("23505")

        with pytest.raises(APIError) as exc_info:
            BaseRepository(MagicMock())._execute("test.insert", query)

        assert is_unique_violation(exc_info.value)

    def test_execute_wraps_other_api_errors(self):
        """Other PostgREST errors become StoreUnavailableError."""
        query = MagicMock()
        query.execute.side_effect = api_error("PGRST301")

        with pytest.raises(StoreUnavailableError) as exc_info:
            BaseRepository(MagicMock())._execute("test.select", query)

        assert exc_info.value.operation == "test.select"

    def test_execute_wraps_transport_errors(self):
        """Timeouts and connection errors become StoreUnavailableError."""
        query = MagicMock()
        query.execute.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(StoreUnavailableError) as exc_info:
            BaseRepository(MagicMock())._execute("test.select", query)

        assert exc_info.value.details["reason"] == "ReadTimeout"


class TestHelpers:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is timezone.utc

    def test_is_unique_violation(self):
        assert is_unique_violation(api_error("23505"))
        assert not is_unique_violation(api_error("23503"))
