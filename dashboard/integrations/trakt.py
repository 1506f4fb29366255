"""
Trakt integration: watch statistics plus movies and shows rated 9 or 10.

API Documentation: https://trakt.docs.apiary.io/
"""
from typing import Any, Dict, List

from dashboard.integrations.config_provider import get_section, require
from dashboard.integrations.fetcher import fetch_json
from dashboard.integrations.payloads import (
    TraktMedia,
    TraktRating,
    TraktStats,
    parse_payload,
    parse_payload_list,
)
from dashboard.integrations.pipeline import PipelineContext, PipelineDefinition
from dashboard.integrations.transforms import TOP_RATINGS, filter_by_rating
from dashboard.models.enums import IntegrationName
from dashboard.models.snapshot import TraktSnapshot

TRAKT_API_URL = "https://api.trakt.tv"
TRAKT_API_VERSION = "2"

NAME = IntegrationName.TRAKT.value


def _headers(client_id: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "trakt-api-version": TRAKT_API_VERSION,
        "trakt-api-key": client_id,
    }


def simplify_rating(rating: TraktRating) -> Dict[str, Any]:
    """Reduce a ratings entry to what the dashboard shows."""
    media = rating.movie or rating.show or TraktMedia()
    return {
        "title": media.title,
        "year": media.year,
        "slug": media.ids.slug,
        "imdb": media.ids.imdb,
        "rating": rating.rating,
        "rated_at": rating.rated_at.isoformat() if rating.rated_at else None,
    }


async def read_settings(context: PipelineContext) -> PipelineContext:
    section = get_section(context.config, IntegrationName.TRAKT)
    return context.with_data(
        user=require(section.user, "Missing Trakt username"),
        client_id=require(section.id, "Missing Trakt client id"),
    )


async def fetch_stats(context: PipelineContext) -> PipelineContext:
    data = await fetch_json(
        f"{TRAKT_API_URL}/users/{context.get('user')}/stats",
        integration=NAME,
        headers=_headers(context.get("client_id")),
    )
    stats = parse_payload(TraktStats, data, "Could not parse Trakt stats data")
    return context.with_data(stats=stats.model_dump(mode="json"))


async def _top_ratings(context: PipelineContext, media_type: str) -> List[Dict[str, Any]]:
    ratings_path = ",".join(str(r) for r in sorted(TOP_RATINGS))
    data = await fetch_json(
        f"{TRAKT_API_URL}/users/{context.get('user')}/ratings/{media_type}/{ratings_path}",
        integration=NAME,
        headers=_headers(context.get("client_id")),
    )
    ratings = parse_payload_list(TraktRating, data, f"Could not parse Trakt {media_type} ratings")
    return [simplify_rating(r) for r in filter_by_rating(ratings)]


async def fetch_top_movies(context: PipelineContext) -> PipelineContext:
    return context.with_data(top_movies=await _top_ratings(context, "movies"))


async def fetch_top_shows(context: PipelineContext) -> PipelineContext:
    return context.with_data(top_shows=await _top_ratings(context, "shows"))


def build_snapshot(context: PipelineContext) -> TraktSnapshot:
    return TraktSnapshot(
        stats=context.get("stats"),
        top_movies=context.get("top_movies"),
        top_shows=context.get("top_shows"),
    )


PIPELINE = PipelineDefinition(
    name=IntegrationName.TRAKT,
    stages=(read_settings, fetch_stats, fetch_top_movies, fetch_top_shows),
    build_snapshot=build_snapshot,
)
