"""
Proxy Routes - Downstream Resource Forwarding
==============================================

Sample protected endpoint that forwards to the downstream resource API.

Security Model:
---------------
1. Requests must carry a valid session cookie (obtained via /auth/token)
2. The session is checked by the require_session dependency; it is never
   extended here
3. The session cookie is not forwarded downstream

Endpoints:
----------
- GET /user/posts: First five posts from the resource API
"""

import logging
from typing import Any, List

import httpx
from fastapi import APIRouter, Depends

from ..auth.session import require_session
from ..config import Settings
from ..dependencies import get_app_settings, get_http_client
from ..errors import UpstreamError
from ..models import ErrorResponse, PostsResponse, UserProfile

logger = logging.getLogger(__name__)

POSTS_LIMIT = 5

# Create router
proxy_router = APIRouter(
    prefix="/user",
    tags=["resources"],
)


async def fetch_posts(
    client: httpx.AsyncClient,
    settings: Settings,
    limit: int = POSTS_LIMIT,
) -> List[Any]:
    """
    Fetch posts from the resource API and keep the first `limit` entries.

    One GET, no retry.

    Raises:
        UpstreamError: On network failure, non-2xx status, invalid JSON,
                       or a body that is not a list
    """
    try:
        response = await client.get(settings.POSTS_URL)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        raise UpstreamError(
            f"Resource API returned {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamError(f"Resource API unreachable: {e}") from e
    except ValueError as e:
        raise UpstreamError("Resource API returned invalid JSON") from e

    if not isinstance(data, list):
        raise UpstreamError("Resource API did not return a list")

    return data[:limit]


@proxy_router.get(
    "/posts",
    response_model=PostsResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def user_posts(
    user: UserProfile = Depends(require_session),
    settings: Settings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Return the first five posts for an authenticated session.
    """
    logger.info("Fetching user posts", extra={"user_email": user.email})
    posts = await fetch_posts(client, settings)
    return {"posts": posts}
