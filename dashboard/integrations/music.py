"""
Music integration: last.fm listening history enriched with Spotify artwork.

Stages:
1. read_settings: last.fm key/username and Spotify client credentials
2. fetch_top_artists: top 15 artists of the past 12 months and the artist total
3. fetch_song_count: scrobbles between one year ago and now
4. fetch_spotify_token: client-credentials token, requested once per run
5. enrich_artists: one concurrent Spotify search per artist for image and genres

API Documentation:
- https://www.last.fm/api/show/user.getTopArtists
- https://developer.spotify.com/documentation/web-api/reference/search
"""
import asyncio
from typing import Any, Dict

from dashboard.core.exceptions import PayloadShapeError, RemoteCallError
from dashboard.core.logging_config import log_debug
from dashboard.core.time_utils import one_year_window
from dashboard.integrations.config_provider import get_section, require
from dashboard.integrations.fetcher import fetch_json
from dashboard.integrations.payloads import (
    LastFmRecentTracksResponse,
    LastFmTopArtistsResponse,
    SpotifySearchResponse,
    SpotifyToken,
    parse_payload,
)
from dashboard.integrations.pipeline import PipelineContext, PipelineDefinition
from dashboard.integrations.transforms import TOP_ARTIST_LIMIT, select_image, top_n
from dashboard.models.enums import IntegrationName
from dashboard.models.snapshot import MusicSnapshot

LASTFM_API_URL = "https://ws.audioscrobbler.com/2.0/"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_SEARCH_URL = "https://api.spotify.com/v1/search"

NAME = IntegrationName.MUSIC.value


async def read_settings(context: PipelineContext) -> PipelineContext:
    section = get_section(context.config, IntegrationName.MUSIC)
    # The key is checked first so a missing key never reaches the network
    key = require(section.last_fm_key, "Missing LastFM key")
    return context.with_data(
        last_fm_key=key,
        last_fm_username=require(section.last_fm_username, "Missing LastFM username"),
        spotify_id=require(section.spotify_id, "Missing Spotify client id"),
        spotify_secret=require(section.spotify_secret, "Missing Spotify client secret"),
    )


async def fetch_top_artists(context: PipelineContext) -> PipelineContext:
    data = await fetch_json(
        LASTFM_API_URL,
        integration=NAME,
        params={
            "method": "user.gettopartists",
            "user": context.get("last_fm_username"),
            "limit": TOP_ARTIST_LIMIT,
            "page": 1,
            "api_key": context.get("last_fm_key"),
            "format": "json",
            "period": "12month",
        },
    )
    payload = parse_payload(LastFmTopArtistsResponse, data, "Could not parse top artist data")
    top = payload.topartists
    if top is None or not top.artist or top.attr is None or top.attr.total is None:
        raise PayloadShapeError("Could not parse top artist data")

    names = [artist.name for artist in top_n(top.artist) if artist.name]
    if not names:
        raise PayloadShapeError("Could not parse top artist data")

    return context.with_data(artist_names=names, artist_count=top.attr.total)


async def fetch_song_count(context: PipelineContext) -> PipelineContext:
    start, end = one_year_window()
    data = await fetch_json(
        LASTFM_API_URL,
        integration=NAME,
        params={
            "method": "user.getrecenttracks",
            "user": context.get("last_fm_username"),
            "limit": 1,
            "page": 1,
            "api_key": context.get("last_fm_key"),
            "format": "json",
            "from": start,
            "to": end,
        },
    )
    payload = parse_payload(LastFmRecentTracksResponse, data, "Could not parse recent tracks data")
    recent = payload.recenttracks
    if recent is None or recent.attr is None or recent.attr.total is None:
        raise PayloadShapeError("Could not parse recent tracks data")
    return context.with_data(song_count=recent.attr.total)


async def fetch_spotify_token(context: PipelineContext) -> PipelineContext:
    data = await fetch_json(
        SPOTIFY_TOKEN_URL,
        integration=NAME,
        method="POST",
        data={"grant_type": "client_credentials"},
        auth=(context.get("spotify_id"), context.get("spotify_secret")),
    )
    token = parse_payload(SpotifyToken, data, "Error parsing access token")
    if not token.access_token:
        raise RemoteCallError(f"Error parsing access token: {token.error or 'no token returned'}")
    return context.with_data(spotify_token=token.access_token)


async def search_artist(name: str, access_token: str) -> Dict[str, Any]:
    """Look up one artist on Spotify and return ``{artist, img, genres}``."""
    data = await fetch_json(
        SPOTIFY_SEARCH_URL,
        integration=NAME,
        params={"q": name, "type": "artist", "market": "US", "limit": 1, "offset": 0},
        headers={"Authorization": f"Bearer {access_token}"},
    )
    payload = parse_payload(SpotifySearchResponse, data, "Could not parse genre data")
    if payload.artists is None or not payload.artists.items or payload.artists.items[0].genres is None:
        raise PayloadShapeError("Could not parse genre data")

    match = payload.artists.items[0]
    image = select_image(match.images)
    return {
        "artist": name,
        "img": image.url if image else None,
        "genres": match.genres,
    }


async def enrich_artists(context: PipelineContext) -> PipelineContext:
    names = context.get("artist_names")
    token = context.get("spotify_token")
    log_debug(f"Looking up {len(names)} artists on Spotify", integration=NAME)
    # Results keep the input order; the first failure cancels the other searches
    tasks = [asyncio.ensure_future(search_artist(name, token)) for name in names]
    try:
        artists = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return context.with_data(top_artists=list(artists))


def build_snapshot(context: PipelineContext) -> MusicSnapshot:
    return MusicSnapshot(
        top_artists=context.get("top_artists"),
        song_count=context.get("song_count"),
        artist_count=context.get("artist_count"),
    )


PIPELINE = PipelineDefinition(
    name=IntegrationName.MUSIC,
    stages=(
        read_settings,
        fetch_top_artists,
        fetch_song_count,
        fetch_spotify_token,
        enrich_artists,
    ),
    build_snapshot=build_snapshot,
)
