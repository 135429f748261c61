"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.backend.core.config import AuthSettings, get_auth_settings
from keepnotes.backend.core.database import get_db_session
from keepnotes.backend.core.security import create_access_token
from keepnotes.backend.models.user import User

API = "/api"

# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
    auth_settings: AuthSettings,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database session and auth settings overrides.

    Every request runs against the test session; it is committed when the
    request succeeds and rolled back when it fails, like the real dependency.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    from keepnotes.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_auth_settings] = lambda: auth_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            The "data" member of the envelope
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        body = response.json()
        assert isinstance(body.get("message"), str), f"Missing message: {body}"
        assert "data" in body, f"Missing data: {body}"
        return body["data"]

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error envelope.

        Returns:
            Response JSON body
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        body = response.json()
        assert body.get("error"), f"Missing error title: {body}"
        assert body.get("message"), f"Missing error message: {body}"
        assert "data" not in body

        if expected_code:
            assert body.get("code") == expected_code, (
                f"Expected error code {expected_code}, got {body.get('code')}"
            )

        return body

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        body = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            fields = [e.get("field", "") for e in body.get("errors", [])]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return body


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """
    Register an account through the API.

    Returns the "data" member of the response: {"token", "user"}.
    """

    async def _register(
        email: str = "ada@example.com",
        password: str = "Secret123",
        first_name: str = "Ada",
        last_name: str = "Lovelace",
    ) -> dict[str, Any]:
        response = await client.post(
            f"{API}/auth/register",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
async def user_headers(register) -> dict[str, str]:
    """Bearer headers for a freshly registered account."""
    data = await register()
    return bearer(data["token"])


@pytest.fixture
def headers_for(auth_settings: AuthSettings) -> Callable[[User], dict[str, str]]:
    """Bearer headers for a user inserted directly into the database."""

    def _headers_for(user: User) -> dict[str, str]:
        return bearer(create_access_token(user.id, auth_settings))

    return _headers_for


@pytest.fixture
def create_note(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """
    Create a note through the API.

    Usage:
        note = await create_note(headers, title="Groceries")
    """

    async def _create_note(
        headers: dict[str, str],
        title: str = "Note",
        content: str = "Body",
        pinned: bool = False,
        **fields: Any,
    ) -> dict[str, Any]:
        response = await client.post(
            f"{API}/notes",
            json={"title": title, "content": content, **fields},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        note = response.json()["data"]
        if pinned:
            pin = await client.post(f"{API}/notes/{note['id']}/pin", headers=headers)
            assert pin.status_code == 200, pin.text
            note["isPinned"] = True
        return note

    return _create_note
