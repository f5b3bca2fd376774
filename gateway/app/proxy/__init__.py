"""
Proxy Package
=============

Authenticated endpoints that forward to the downstream resource API.

Main Components:
----------------
- routes.py: FastAPI router with proxy endpoints (/user/posts)

Usage:
------
    from gateway.app.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
