"""
Unit Tests for Base Service.

Tests the BaseService class methods and error handling.
"""

import pytest
from unittest.mock import AsyncMock

from sqlalchemy.exc import IntegrityError, OperationalError

from keepnotes.backend.core.exceptions import ConflictError, DatabaseError
from keepnotes.backend.services.base import BaseService


class TestBaseServiceInit:
    """Tests for BaseService initialization."""

    def test_init_stores_session(self):
        """Should store the provided session."""
        mock_session = AsyncMock()

        service = BaseService(mock_session)

        assert service.session is mock_session

    def test_init_creates_logger(self):
        assert BaseService(AsyncMock())._logger is not None


class TestExecuteDbOperation:
    """Tests for _execute_db_operation method."""

    @pytest.fixture
    def service(self, mock_db_session):
        """Create a BaseService instance."""
        return BaseService(mock_db_session)

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self, service):
        """Should return the coroutine result on success."""
        async def successful_operation():
            return {"id": "123"}

        result = await service._execute_db_operation("test_operation", successful_operation())

        assert result == {"id": "123"}

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self, service):
        """Unique constraint violations surface as ConflictError."""
        async def failing_operation():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

        with pytest.raises(ConflictError) as exc_info:
            await service._execute_db_operation(
                "register_user",
                failing_operation(),
                conflict_message="Email taken",
            )

        assert exc_info.value.message == "Email taken"

    @pytest.mark.asyncio
    async def test_postgres_duplicate_key_becomes_conflict(self, service):
        async def failing_operation():
            raise IntegrityError(
                "INSERT",
                {},
                Exception('duplicate key value violates unique constraint "ix_users_email"'),
            )

        with pytest.raises(ConflictError):
            await service._execute_db_operation("register_user", failing_operation())

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_database_error(self, service):
        async def failing_operation():
            raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(DatabaseError):
            await service._execute_db_operation("create_note", failing_operation())

    @pytest.mark.asyncio
    async def test_sqlalchemy_error_becomes_database_error(self, service):
        async def failing_operation():
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("list_notes", failing_operation())

        assert "connection refused" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self, service):
        async def failing_operation():
            raise KeyError("boom")

        with pytest.raises(KeyError):
            await service._execute_db_operation("anything", failing_operation())
