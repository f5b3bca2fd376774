"""
Shared fixtures for gateway tests.

Outbound HTTP is replaced by an AsyncMock client injected through
dependency overrides; responses are real httpx.Response objects so
raise_for_status() and json() behave as in production.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from gateway.app.config import Settings
from gateway.app.dependencies import get_http_client
from gateway.app.main import create_app


TEST_TOKEN_SECRET = "test-session-secret-0123456789abcdef"


@pytest.fixture
def mock_settings():
    """Settings for testing, isolated from any local .env file"""
    return Settings(
        _env_file=None,
        GOOGLE_CLIENT_ID="test-client-id",
        GOOGLE_CLIENT_SECRET="test-client-secret",
        REDIRECT_URL="https://app.example.com/auth/callback",
        CLIENT_URL="https://app.example.com",
        TOKEN_SECRET=TEST_TOKEN_SECRET,
        PROVIDER_TOKEN_URL="https://provider.example.com/token",
        POSTS_URL="https://resources.example.com/posts",
    )


@pytest.fixture
def mock_http_client():
    """Mock httpx AsyncClient for the token exchange and resource API"""
    return AsyncMock()


@pytest.fixture
def app(mock_settings, mock_http_client):
    """Create test FastAPI application"""
    app = create_app(mock_settings)
    app.dependency_overrides[get_http_client] = lambda: mock_http_client
    return app


@pytest.fixture
def client(app):
    """
    Create test client.

    The session cookie is Secure, so the client talks https to keep
    cookies in its jar between requests.
    """
    return TestClient(app, base_url="https://testserver")
