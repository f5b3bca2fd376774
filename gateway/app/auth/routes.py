"""
Authentication routes for the OIDC authorization code flow.

This module wires the consent URL, the code exchange, the login-status
check and logout onto the /auth prefix. Session state lives entirely in
the "token" cookie.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Cookie, Depends, Query, Response

from ..config import Settings
from ..dependencies import get_app_settings, get_http_client
from ..models import (
    AuthUrlResponse,
    ErrorResponse,
    LoginStatusResponse,
    MessageResponse,
    UserResponse,
)
from .exchange import exchange_code_for_profile
from .session import (
    clear_session_cookie,
    create_session_jwt,
    refresh_session,
    set_session_cookie,
)
from .utils import build_authorization_url

logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

auth_router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
)


# =============================================================================
# Consent URL
# =============================================================================

@auth_router.get("/url", response_model=AuthUrlResponse)
async def auth_url(settings: Settings = Depends(get_app_settings)):
    """
    Return the provider authorization URL the browser should be sent to.
    """
    logger.debug("Generating provider authorization URL")
    return {"url": build_authorization_url(settings)}


# =============================================================================
# Code Exchange
# =============================================================================

@auth_router.get(
    "/token",
    response_model=UserResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def exchange_token(
    response: Response,
    code: Optional[str] = Query(None, description="Authorization code from the provider"),
    settings: Settings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Exchange the authorization code and start a session.

    This endpoint:
    1. Exchanges the code for the provider's identity token
    2. Extracts name, email and picture from its claims
    3. Issues a session JWT and sets it as the "token" cookie

    Errors (400 missing code / missing id_token, 500 provider failure) are
    raised as GatewayError subclasses and rendered by the app; no cookie is
    set on any error path.
    """
    user = await exchange_code_for_profile(code, settings, client)

    session_token = create_session_jwt(user, settings)
    logger.info("Setting session cookie", extra={"user_email": user.email})
    set_session_cookie(response, session_token, settings)

    return {"user": user}


# =============================================================================
# Login Status
# =============================================================================

@auth_router.get(
    "/logged_in",
    response_model=LoginStatusResponse,
    response_model_exclude_none=True,
)
async def logged_in(
    response: Response,
    token: Optional[str] = Cookie(None),
    settings: Settings = Depends(get_app_settings),
):
    """
    Report whether the caller has a valid session, extending it if so.

    Always answers 200: missing, expired or tampered cookies all come back
    as {"loggedIn": false}. A valid cookie is replaced with a fresh one
    carrying a full new expiration window.
    """
    refreshed = refresh_session(token, settings)
    if refreshed is None:
        return {"loggedIn": False}

    user, new_token = refreshed
    logger.debug("Resetting session cookie with new token")
    set_session_cookie(response, new_token, settings)

    return {"loggedIn": True, "user": user}


# =============================================================================
# Logout
# =============================================================================

@auth_router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """
    Clear the session cookie. Not gated: a stale cookie can always be cleared.
    """
    logger.info("Logging out and clearing session cookie")
    clear_session_cookie(response)
    return {"message": "Logged out"}
