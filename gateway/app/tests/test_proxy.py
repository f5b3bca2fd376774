"""
Unit Tests for Proxy Routes
============================

Tests for gateway/app/proxy/routes.py

Test Coverage:
--------------
1. Authentication enforcement (reject requests without a valid session cookie)
2. Truncation of the downstream list to five entries
3. Error handling (network errors, upstream error status, bad bodies)
4. Session cookie is neither refreshed nor forwarded downstream
"""

import httpx
import pytest
from fastapi import status

from gateway.app.auth.session import create_session_jwt
from gateway.app.models import UserProfile


def resource_response(body, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=body,
        request=httpx.Request("GET", "https://resources.example.com/posts"),
    )


def make_posts(count: int):
    return [
        {"userId": 1, "id": i, "title": f"post {i}", "body": "..."}
        for i in range(1, count + 1)
    ]


@pytest.fixture
def session_cookie(client, mock_settings):
    """Put a valid session cookie in the client's jar"""
    token = create_session_jwt(
        UserProfile(name="Test User", email="user@example.com"), mock_settings
    )
    client.cookies.set("token", token)
    return token


# ============================================================================
# Authentication Tests
# ============================================================================

def test_posts_requires_session_cookie(client, mock_http_client):
    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Unauthorized"}
    mock_http_client.get.assert_not_called()


def test_posts_rejects_expired_cookie(client, mock_settings, mock_http_client):
    expired = create_session_jwt(UserProfile(email="user@example.com"), mock_settings, expires_in=-10)
    client.cookies.set("token", expired)

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Unauthorized"}
    mock_http_client.get.assert_not_called()


def test_posts_rejects_cookie_signed_with_other_secret(client, mock_settings, mock_http_client):
    other = mock_settings.model_copy(update={"TOKEN_SECRET": "x" * 40})
    client.cookies.set("token", create_session_jwt(UserProfile(email="user@example.com"), other))

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Unauthorized"}


# ============================================================================
# Forwarding Tests
# ============================================================================

@pytest.mark.parametrize("upstream_count, expected_count", [(0, 0), (3, 3), (20, 5)])
def test_posts_returns_at_most_five(
    client,
    session_cookie,
    mock_http_client,
    mock_settings,
    upstream_count,
    expected_count,
):
    posts = make_posts(upstream_count)
    mock_http_client.get.return_value = resource_response(posts)

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"posts": posts[:expected_count]}

    mock_http_client.get.assert_called_once()
    assert mock_http_client.get.call_args.args[0] == mock_settings.POSTS_URL


def test_posts_does_not_refresh_session(client, session_cookie, mock_http_client):
    mock_http_client.get.return_value = resource_response(make_posts(2))

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_200_OK
    assert "set-cookie" not in response.headers


def test_session_cookie_not_forwarded(client, session_cookie, mock_http_client):
    mock_http_client.get.return_value = resource_response([])

    client.get("/user/posts")

    call_args = mock_http_client.get.call_args
    assert "cookies" not in call_args.kwargs
    assert "headers" not in call_args.kwargs


# ============================================================================
# Error Handling Tests
# ============================================================================

def test_upstream_network_error_returns_500(client, session_cookie, mock_http_client):
    mock_http_client.get.side_effect = httpx.ConnectError("connection refused")

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Server error"}
    assert mock_http_client.get.call_count == 1


def test_upstream_error_status_returns_500(client, session_cookie, mock_http_client):
    mock_http_client.get.return_value = resource_response({"error": "boom"}, status_code=503)

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Server error"}
    assert mock_http_client.get.call_count == 1


def test_upstream_non_list_body_returns_500(client, session_cookie, mock_http_client):
    mock_http_client.get.return_value = resource_response({"posts": make_posts(3)})

    response = client.get("/user/posts")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Server error"}


# ============================================================================
# System Endpoint Tests
# ============================================================================

def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "auth-gateway"
