"""
JWT Session Management Module
==============================

Handles creation and verification of the session credential: a signed,
self-contained JWT wrapping {user: UserProfile}, carried in the "token"
cookie. There is no server-side session store and no revocation list;
a valid signature and an unexpired "exp" are the whole trust decision.

Built on the codec:
- authenticate_session / require_session: the read-only gate for protected routes
- refresh_session: the sliding re-issue used by the login-status check
- set_session_cookie / clear_session_cookie: the cookie contract
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from fastapi import Cookie, Depends, Response
from pydantic import ValidationError

from ..config import Settings
from ..dependencies import get_app_settings
from ..errors import InvalidSignatureError, SessionExpiredError, UnauthorizedError
from ..models import UserProfile

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "token"


# =============================================================================
# Token Creation
# =============================================================================

def create_session_jwt(
    user: UserProfile,
    settings: Settings,
    expires_in: Optional[int] = None,
    replaces_exp: Optional[int] = None,
) -> str:
    """
    Create a session JWT for the given user profile.

    Args:
        user: Profile to embed under the "user" claim
        settings: Application settings (secret, algorithm, lifetime)
        expires_in: Lifetime override in seconds; defaults to
                    TOKEN_EXPIRATION_SECONDS. A negative value yields an
                    already-expired token.
        replaces_exp: "exp" of the token being re-issued. The new "exp"
                      is at least one second past it, since JWT
                      timestamps have whole-second resolution.

    Returns:
        Encoded JWT string

    Example:
        >>> token = create_session_jwt(UserProfile(email="a@b.com"), settings)
    """
    lifetime = settings.TOKEN_EXPIRATION_SECONDS if expires_in is None else expires_in
    now = datetime.now(timezone.utc)

    exp = int((now + timedelta(seconds=lifetime)).timestamp())
    if replaces_exp is not None:
        exp = max(exp, replaces_exp + 1)

    payload = {
        "user": user.model_dump(),
        "iat": now,
        "exp": exp,
    }

    token = jwt.encode(
        payload,
        settings.TOKEN_SECRET,
        algorithm=settings.SESSION_JWT_ALGORITHM,
    )

    logger.debug(
        "Created session JWT",
        extra={"user_email": user.email, "expires_in_seconds": lifetime}
    )

    return token


# =============================================================================
# Token Verification
# =============================================================================

def verify_session_jwt(token: str, settings: Settings) -> UserProfile:
    """
    Verify a session JWT and return the embedded user profile.

    Args:
        token: JWT string from the session cookie
        settings: Application settings

    Returns:
        The UserProfile stored under the "user" claim

    Raises:
        SessionExpiredError: If the token is past its "exp"
        InvalidSignatureError: If the signature does not match, the token
                               is malformed, or the payload has no valid user
    """
    user, _ = decode_session_jwt(token, settings)
    return user


def decode_session_jwt(token: str, settings: Settings) -> Tuple[UserProfile, int]:
    """
    Verify a session JWT and return (user profile, "exp" timestamp).

    Raises the same errors as verify_session_jwt.
    """
    try:
        decoded = jwt.decode(
            token,
            settings.TOKEN_SECRET,
            algorithms=[settings.SESSION_JWT_ALGORITHM],
            options={
                "verify_signature": True,
                "verify_exp": True,
                "require": ["exp", "iat"],
            }
        )
    except ExpiredSignatureError as e:
        raise SessionExpiredError("Session token has expired") from e
    except InvalidTokenError as e:
        raise InvalidSignatureError(f"Invalid session token: {e}") from e

    user = decoded.get("user")
    if not isinstance(user, dict):
        raise InvalidSignatureError("Session token has no user claim")

    try:
        profile = UserProfile.model_validate(user)
    except ValidationError as e:
        raise InvalidSignatureError(f"Malformed user claim: {e}") from e

    return profile, int(decoded["exp"])


# =============================================================================
# Session Gate and Refresh
# =============================================================================

def authenticate_session(token: Optional[str], settings: Settings) -> UserProfile:
    """
    Admission decision for protected routes.

    Read-only: the session is never re-issued or extended here, so the same
    valid cookie yields the same decision until it expires.

    Raises:
        UnauthorizedError: If no token is present or it fails verification.
            The specific cause is logged but never returned to the client.
    """
    if not token:
        logger.warning("No session token found in cookies")
        raise UnauthorizedError("No session token")

    try:
        return verify_session_jwt(token, settings)
    except (InvalidSignatureError, SessionExpiredError) as e:
        logger.warning(
            "Session authentication failed",
            extra={"reason": type(e).__name__, "detail": e.detail}
        )
        raise UnauthorizedError(e.detail) from e


def refresh_session(
    token: Optional[str],
    settings: Settings,
) -> Optional[Tuple[UserProfile, str]]:
    """
    Re-validate a session and issue a credential with a full new window.

    The new "exp" is always strictly later than the old one, even when the
    refresh lands in the same second the old token was issued.

    Returns:
        (user, new_token) on success, None when there is no token or it
        fails verification. Failures are logged, not raised.
    """
    if not token:
        logger.info("Login status check without session token")
        return None

    try:
        user, old_exp = decode_session_jwt(token, settings)
    except (InvalidSignatureError, SessionExpiredError) as e:
        logger.warning(
            "Login status check with unusable session token",
            extra={"reason": type(e).__name__, "detail": e.detail}
        )
        return None

    return user, create_session_jwt(user, settings, replaces_exp=old_exp)


# =============================================================================
# FastAPI Dependencies
# =============================================================================

def require_session(
    token: Optional[str] = Cookie(None),
    settings: Settings = Depends(get_app_settings),
) -> UserProfile:
    """
    FastAPI dependency that admits only requests with a valid session cookie.

    Usage in routes:
        @router.get("/protected")
        async def protected_route(user: UserProfile = Depends(require_session)):
            return {"email": user.email}
    """
    return authenticate_session(token, settings)


# =============================================================================
# Cookie Helpers
# =============================================================================

def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session credential as an HttpOnly, Secure, SameSite=None cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.TOKEN_EXPIRATION_SECONDS,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


__all__ = [
    "SESSION_COOKIE_NAME",
    "create_session_jwt",
    "verify_session_jwt",
    "decode_session_jwt",
    "authenticate_session",
    "refresh_session",
    "require_session",
    "set_session_cookie",
    "clear_session_cookie",
]
