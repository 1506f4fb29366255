"""
Database models.
"""
from .base import BaseModel, TimestampMixin
from .enums import IntegrationName, PipelineStatus, UserRole
from .user import User
from .app_config import AppConfig
from .snapshot import (
    FeedlySnapshot,
    GoodreadsSnapshot,
    MusicSnapshot,
    SnapshotBase,
    TraktSnapshot,
)

SNAPSHOT_MODELS = {
    IntegrationName.MUSIC: MusicSnapshot,
    IntegrationName.TRAKT: TraktSnapshot,
    IntegrationName.FEEDLY: FeedlySnapshot,
    IntegrationName.GOODREADS: GoodreadsSnapshot,
}

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "IntegrationName",
    "PipelineStatus",
    "UserRole",
    "User",
    "AppConfig",
    "SnapshotBase",
    "MusicSnapshot",
    "TraktSnapshot",
    "FeedlySnapshot",
    "GoodreadsSnapshot",
    "SNAPSHOT_MODELS",
]
