import httpx
from fastapi import HTTPException, Request, status

from .config import Settings


def get_app_settings(request: Request) -> Settings:
    """
    Dependency returning the Settings the application was created with.
    """
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Dependency to get the shared outbound HTTP client from app state.
    """
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="HTTP client not initialized"
        )
    return client
