"""
Gateway error taxonomy.

Every error carries the HTTP status it maps to and a public message. The
public message is all a client ever sees; the exception text (detail) is
for logs only.
"""

from typing import Optional

from fastapi import status


class GatewayError(Exception):
    """Base exception for errors rendered as {"message": ...} responses"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.message
        super().__init__(self.detail)


# =============================================================================
# Code Exchange
# =============================================================================

class MissingCodeError(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Authorization code must be provided"


class MissingIdentityTokenError(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Authorization error"


class ProviderExchangeError(GatewayError):
    """Token endpoint unreachable, non-2xx, or returned an unusable body"""


# =============================================================================
# Session Credential
# =============================================================================

class SessionTokenError(GatewayError):
    """Base for session credential verification failures"""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidSignatureError(SessionTokenError):
    pass


class SessionExpiredError(SessionTokenError):
    pass


class UnauthorizedError(GatewayError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


# =============================================================================
# Downstream Resource
# =============================================================================

class UpstreamError(GatewayError):
    """Downstream resource API failed; never retried"""


__all__ = [
    "GatewayError",
    "MissingCodeError",
    "MissingIdentityTokenError",
    "ProviderExchangeError",
    "SessionTokenError",
    "InvalidSignatureError",
    "SessionExpiredError",
    "UnauthorizedError",
    "UpstreamError",
]
