"""
Remote Fetcher: one HTTP request per call, no retries.

Network failures, non-2xx statuses and unparseable bodies all surface as
RemoteCallError. The shared client's timeout is the only timeout applied.
"""
from typing import Any, Dict, Mapping, Optional

import httpx

from dashboard.core.exceptions import RemoteCallError
from dashboard.core.http_client import get_http_client
from dashboard.core.logging_config import log_debug


async def _request(
    url: str,
    *,
    integration: str,
    method: str = "GET",
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    data: Optional[Mapping[str, Any]] = None,
    auth: Optional[httpx.Auth | tuple[str, str]] = None,
) -> httpx.Response:
    client = await get_http_client()
    log_debug(f"{method} {url}", integration=integration)
    try:
        response = await client.request(
            method,
            url,
            params=params,
            headers=headers,
            data=data,
            auth=auth,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise RemoteCallError(
            f"{method} {url} returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise RemoteCallError(f"{method} {url} failed: {exc!r}") from exc
    return response


async def fetch_json(
    url: str,
    *,
    integration: str,
    method: str = "GET",
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    data: Optional[Mapping[str, Any]] = None,
    auth: Optional[httpx.Auth | tuple[str, str]] = None,
) -> Any:
    """Perform the request and return the decoded JSON body."""
    response = await _request(
        url,
        integration=integration,
        method=method,
        params=params,
        headers=headers,
        data=data,
        auth=auth,
    )
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteCallError(f"{method} {url} returned a body that is not valid JSON") from exc


async def fetch_text(
    url: str,
    *,
    integration: str,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> str:
    """Perform a GET request and return the body as text (XML endpoints)."""
    response = await _request(url, integration=integration, params=params, headers=headers)
    return response.text
