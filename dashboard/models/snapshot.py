"""
Snapshot tables, one per integration.

Snapshots are append-only: every successful pipeline run inserts a new row
and history accumulates ordered by ``created_at``. Rows hold only the
fields produced by the integration's transform step.
"""
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, Column as SQLModelColumn, JSON

from .base import BaseModel


def JSONType():
    return JSONB().with_variant(JSON, "sqlite")


class SnapshotBase(BaseModel):
    """Columns shared by all snapshot tables."""

    # No sa_column here: a Column instance cannot be shared between tables
    user_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="user.id",
        ondelete="CASCADE",
        nullable=True,
        index=True
    )


class MusicSnapshot(SnapshotBase, table=True):
    """Top artists and listening totals for the past year."""
    __tablename__ = "music_snapshot"

    top_artists: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False),
        description="[{artist, img, genres}] in last.fm rank order"
    )
    song_count: int = Field(default=0, ge=0)
    artist_count: int = Field(default=0, ge=0)


class TraktSnapshot(SnapshotBase, table=True):
    """Watch statistics and highly rated movies and shows."""
    __tablename__ = "trakt_snapshot"

    stats: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )
    top_movies: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )
    top_shows: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )


class FeedlySnapshot(SnapshotBase, table=True):
    """Subscribed feeds as an outline tree."""
    __tablename__ = "feedly_snapshot"

    feeds: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )


class GoodreadsSnapshot(SnapshotBase, table=True):
    """Reading totals, recent reads and books in progress."""
    __tablename__ = "goodreads_snapshot"

    book_count: int = Field(default=0, ge=0)
    books_this_year: int = Field(default=0, ge=0)
    pages_this_year: int = Field(default=0, ge=0)
    recent_books: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )
    currently_reading: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=SQLModelColumn(JSONType(), nullable=False)
    )
