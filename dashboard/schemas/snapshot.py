"""
Snapshot response schemas.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from dashboard.models.enums import IntegrationName


class SnapshotResponse(BaseModel):
    """
    One stored snapshot.

    ``data`` holds the integration-specific fields (for music:
    ``top_artists``, ``song_count``, ``artist_count``).
    """
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    integration: IntegrationName
    user_id: Optional[uuid.UUID] = None
    created_at: datetime
    data: Dict[str, Any]


class SnapshotListResponse(BaseModel):
    """Snapshot history, newest first."""
    integration: IntegrationName
    items: List[SnapshotResponse]
    count: int
