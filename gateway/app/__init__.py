"""
Auth Gateway Application
========================

OpenID Connect authorization code gateway. Exchanges provider codes for a
signed session JWT kept in an HttpOnly cookie, refreshes it on login-status
polls, and gates access to a downstream resource endpoint.
"""

__version__ = "1.0.0"
