"""
Authentication Package

This package handles the OpenID Connect authorization code flow and the
cookie-based session for the gateway.

Modules:
- routes: Public authentication endpoints (/auth/url, /auth/token, etc.)
- exchange: Server-to-server authorization code exchange
- utils: Authorization URL building and identity claim extraction
- session: Session JWT creation, verification, gate and refresh

The authentication flow:
1. Client fetches the consent URL from /auth/url
2. User consents at the identity provider
3. Client sends the returned code to /auth/token
4. Gateway exchanges the code, issues a session JWT, sets the cookie
5. Client polls /auth/logged_in, which extends the session
"""

from .routes import auth_router

__all__ = [
    "auth_router",
]
