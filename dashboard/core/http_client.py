"""
Shared HTTP client for integration pipelines.

Provides a singleton httpx.AsyncClient for connection pooling and efficient resource usage.
"""
import asyncio
from typing import Optional

import httpx
from dashboard.core.config import settings
from dashboard.core.logging_config import log_info

_client: Optional[httpx.AsyncClient] = None
_client_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    """Get or create the client lock."""
    global _client_lock
    if _client_lock is None:
        _client_lock = asyncio.Lock()
    return _client_lock


async def get_http_client() -> httpx.AsyncClient:
    """
    Get the shared AsyncClient instance.

    Creates a new instance if one doesn't exist or is closed. The client's
    timeout is the only timeout applied to outbound integration calls and
    no transport-level retries are configured.
    """
    global _client
    if _client is None or _client.is_closed:
        async with _get_lock():
            if _client is None or _client.is_closed:
                _client = httpx.AsyncClient(
                    timeout=settings.http_timeout_seconds,
                    headers={"User-Agent": settings.http_user_agent},
                    follow_redirects=True,
                )
                log_info("HTTP client created", timeout=settings.http_timeout_seconds)
    return _client


async def close_http_client():
    """Close the shared client if it exists."""
    global _client, _client_lock
    async with _get_lock():
        if _client and not _client.is_closed:
            await _client.aclose()
            _client = None
            log_info("HTTP client closed")
    # The lock is bound to the event loop that created it.
    _client_lock = None

