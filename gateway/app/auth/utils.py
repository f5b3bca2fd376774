"""
Authentication utilities for the provider consent URL and identity claims.

This module handles:
- Building the authorization URL that starts the consent flow
- Decoding identity token claims returned by the token endpoint
- Mapping claims onto the UserProfile carried in session credentials
"""

from typing import Any, Dict
from urllib.parse import quote, urlencode

from jose import jwt, JWTError

from ..config import Settings
from ..errors import ProviderExchangeError
from ..models import UserProfile


OIDC_SCOPES = ("openid", "profile", "email")


# =============================================================================
# Authorization URL
# =============================================================================

def build_authorization_url(settings: Settings) -> str:
    """
    Build the provider authorization URL.

    prompt=consent forces the consent screen on every login, and the state
    value is the fixed OAUTH_STATE setting rather than a per-request nonce.

    Returns:
        Authorization endpoint URL with the encoded query string
    """
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.REDIRECT_URL,
        "response_type": "code",
        "scope": " ".join(OIDC_SCOPES),
        "access_type": "offline",
        "state": settings.OAUTH_STATE,
        "prompt": "consent",
    }

    return f"{settings.PROVIDER_AUTH_URL}?{urlencode(params, quote_via=quote)}"


# =============================================================================
# Identity Token Claims
# =============================================================================

def decode_identity_claims(id_token: str) -> Dict[str, Any]:
    """
    Decode identity token claims without verifying the signature.

    The token was received directly from the provider's token endpoint over
    TLS, so that channel is the trust boundary.

    Raises:
        ProviderExchangeError: If the token is malformed
    """
    try:
        return jwt.get_unverified_claims(id_token)
    except JWTError as e:
        raise ProviderExchangeError(f"Malformed identity token: {e}") from e


def extract_profile_from_claims(claims: Dict[str, Any]) -> UserProfile:
    """Pick name, email and picture out of the identity claims."""
    return UserProfile(
        name=claims.get("name"),
        email=claims.get("email"),
        picture=claims.get("picture"),
    )
