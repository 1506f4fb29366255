"""
Schemas for third-party API responses.

Only the fields the transforms read are declared. Everything is optional at
the schema level; the transforms decide which absences are fatal and turn
them into PayloadShapeError with a message naming what could not be parsed.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dashboard.core.exceptions import PayloadShapeError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def parse_payload(model: Type[PayloadT], data: Any, message: str) -> PayloadT:
    """
    Validate ``data`` against ``model``.

    Raises:
        PayloadShapeError: With ``message`` when the payload does not fit.
    """
    if not isinstance(data, dict):
        raise PayloadShapeError(message)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise PayloadShapeError(f"{message}: {exc.error_count()} validation error(s)") from exc


def parse_payload_list(model: Type[PayloadT], data: Any, message: str) -> List[PayloadT]:
    """Validate a JSON array whose items all fit ``model``."""
    if not isinstance(data, list):
        raise PayloadShapeError(message)
    return [parse_payload(model, item, message) for item in data]


# ================================================================================
# LAST.FM
# ================================================================================

class LastFmAttr(Payload):
    """The ``@attr`` paging block; ``total`` arrives as a string."""
    total: Optional[int] = None
    user: Optional[str] = None
    page: Optional[int] = None


class LastFmArtist(Payload):
    name: Optional[str] = None
    playcount: Optional[int] = None


class LastFmTopArtists(Payload):
    artist: List[LastFmArtist] = Field(default_factory=list)
    attr: Optional[LastFmAttr] = Field(default=None, alias="@attr")


class LastFmTopArtistsResponse(Payload):
    topartists: Optional[LastFmTopArtists] = None


class LastFmRecentTracks(Payload):
    attr: Optional[LastFmAttr] = Field(default=None, alias="@attr")


class LastFmRecentTracksResponse(Payload):
    recenttracks: Optional[LastFmRecentTracks] = None


# ================================================================================
# SPOTIFY
# ================================================================================

class SpotifyToken(Payload):
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    error: Optional[str] = None


class SpotifyImage(Payload):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class SpotifyArtist(Payload):
    name: Optional[str] = None
    genres: Optional[List[str]] = None
    images: List[SpotifyImage] = Field(default_factory=list)


class SpotifyArtistPage(Payload):
    items: List[SpotifyArtist] = Field(default_factory=list)


class SpotifySearchResponse(Payload):
    artists: Optional[SpotifyArtistPage] = None


# ================================================================================
# TRAKT
# ================================================================================

class TraktIds(Payload):
    trakt: Optional[int] = None
    slug: Optional[str] = None
    imdb: Optional[str] = None
    tmdb: Optional[int] = None


class TraktMedia(Payload):
    title: Optional[str] = None
    year: Optional[int] = None
    ids: TraktIds = Field(default_factory=TraktIds)


class TraktRating(Payload):
    rating: Optional[int] = None
    rated_at: Optional[datetime] = None
    type: Optional[str] = None
    movie: Optional[TraktMedia] = None
    show: Optional[TraktMedia] = None


class TraktStats(Payload):
    """``/users/{user}/stats``; the whole body is kept, movies and shows must exist."""
    model_config = ConfigDict(extra="allow")

    movies: Dict[str, Any]
    shows: Dict[str, Any]
