"""
Fake HTTP transport for integration tests.
"""
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx


class FakeHttp:
    """
    Stand-in for the shared httpx.AsyncClient.

    ``routes`` maps a URL to either a response body or a callable receiving
    the request kwargs and returning (status, body). Bodies that are strings
    are sent as text, everything else as JSON.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []
        self.client = MagicMock()
        self.client.request = AsyncMock(side_effect=self._request)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        request = httpx.Request(method, url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"error": "not found"}, request=request)

        status, body = route(kwargs) if callable(route) else (200, route)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body, request=request)
        return httpx.Response(status, json=body, request=request)

    def calls_to(self, url: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["url"] == url]

    def patch_target(self) -> AsyncMock:
        return AsyncMock(return_value=self.client)


def lastfm_router(top_artists: Dict[str, Any], recent_tracks: Dict[str, Any]) -> Callable:
    def _route(kwargs):
        method = (kwargs.get("params") or {}).get("method")
        if method == "user.gettopartists":
            return 200, top_artists
        if method == "user.getrecenttracks":
            return 200, recent_tracks
        return 400, {"error": 3, "message": "Invalid Method"}
    return _route


def spotify_search_router(artists: Optional[Dict[str, Dict[str, Any]]] = None) -> Callable:
    """Spotify search responses keyed by the ``q`` parameter."""
    def _route(kwargs):
        name = kwargs["params"]["q"]
        artist = (artists or {}).get(name, {
            "name": name,
            "genres": ["indie"],
            "images": [
                {"url": f"https://i.scdn.co/{name}/640", "width": 640, "height": 640},
                {"url": f"https://i.scdn.co/{name}/320", "width": 320, "height": 320},
            ],
        })
        return 200, {"artists": {"items": [artist]}}
    return _route
