"""FastAPI dependencies for authentication and shared resources."""

import asyncio
import secrets

from fastapi import Header, HTTPException, status

from core import config
from services.feed import FeedError, FeedResult, load_ranges


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not config.AVAILABILITY_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, config.AVAILABILITY_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


async def get_feed_ranges() -> FeedResult:
    """
    Load the configured feed (or its cached copy) inside a route handler.

    Raises:
        HTTPException: 502 if the feed is unavailable and nothing is cached
    """
    try:
        # Blocking network and SQLite I/O, keep it off the event loop
        return await asyncio.to_thread(load_ranges)
    except FeedError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Calendar feed unavailable",
                "code": "FEED_UNAVAILABLE",
                "details": [str(e)],
            },
        ) from e
