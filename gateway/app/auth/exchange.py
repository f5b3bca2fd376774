"""
Authorization code exchange.

Performs the server-to-server exchange of a one-time authorization code for
the provider's identity token and turns its claims into a UserProfile.
Issuing the session credential and setting the cookie are left to the caller.
"""

import logging
from typing import Any, Dict

import httpx

from ..config import Settings
from ..errors import MissingCodeError, MissingIdentityTokenError, ProviderExchangeError
from ..models import UserProfile
from .utils import decode_identity_claims, extract_profile_from_claims

logger = logging.getLogger(__name__)


def build_token_request(code: str, settings: Settings) -> Dict[str, str]:
    """
    Build the form payload for the token endpoint.

    Args:
        code: Authorization code from the provider redirect
        settings: Application settings

    Returns:
        Form fields, sent as application/x-www-form-urlencoded
    """
    return {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "client_secret": settings.GOOGLE_CLIENT_SECRET,
        "code": code,
        "grant_type": "authorization_code",
        "redirect_uri": settings.REDIRECT_URL,
    }


async def _request_tokens(
    code: str,
    settings: Settings,
    client: httpx.AsyncClient,
) -> Dict[str, Any]:
    """
    POST the code to the token endpoint. No retry.

    Raises:
        ProviderExchangeError: On network failure, non-2xx status, or a
                               body that is not a JSON object
    """
    try:
        response = await client.post(
            settings.PROVIDER_TOKEN_URL,
            data=build_token_request(code, settings),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        response.raise_for_status()
        token_data = response.json()
    except httpx.HTTPStatusError as e:
        raise ProviderExchangeError(
            f"Token endpoint returned {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise ProviderExchangeError(f"Token endpoint unreachable: {e}") from e
    except ValueError as e:
        raise ProviderExchangeError("Token endpoint returned invalid JSON") from e

    if not isinstance(token_data, dict):
        raise ProviderExchangeError("Token endpoint returned an unexpected body")

    return token_data


async def exchange_code_for_profile(
    code: str,
    settings: Settings,
    client: httpx.AsyncClient,
) -> UserProfile:
    """
    Exchange an authorization code for the user's profile.

    Args:
        code: Authorization code from the provider redirect
        settings: Application settings
        client: Shared HTTP client

    Returns:
        UserProfile built from the identity token claims

    Raises:
        MissingCodeError: If code is empty
        ProviderExchangeError: If the token endpoint call fails or the
                               identity token is malformed
        MissingIdentityTokenError: If the response has no id_token
    """
    if not code:
        raise MissingCodeError()

    token_data = await _request_tokens(code, settings, client)

    id_token = token_data.get("id_token")
    if not id_token:
        logger.warning("No id_token returned from token endpoint")
        raise MissingIdentityTokenError("Token response missing id_token")

    claims = decode_identity_claims(id_token)
    user = extract_profile_from_claims(claims)

    logger.info("Authorization code exchanged", extra={"user_email": user.email})

    return user
