"""
Read access to stored integration snapshots.
"""
from typing import Any, Dict, List

from sqlalchemy import or_
from sqlmodel import Session, select

from dashboard.core.exceptions import SnapshotNotFoundError
from dashboard.models import SNAPSHOT_MODELS
from dashboard.models.enums import IntegrationName
from dashboard.models.snapshot import SnapshotBase
from dashboard.models.user import User
from dashboard.schemas.snapshot import SnapshotResponse

MAX_HISTORY_LIMIT = 100

# Columns every snapshot table has; everything else is integration data
_COMMON_FIELDS = {"id", "user_id", "created_at", "updated_at"}


def snapshot_data(snapshot: SnapshotBase) -> Dict[str, Any]:
    """Integration-specific fields of a snapshot row."""
    return {
        name: getattr(snapshot, name)
        for name in type(snapshot).model_fields
        if name not in _COMMON_FIELDS
    }


def to_response(integration: IntegrationName, snapshot: SnapshotBase) -> SnapshotResponse:
    return SnapshotResponse(
        id=snapshot.id,
        integration=integration,
        user_id=snapshot.user_id,
        created_at=snapshot.created_at,
        data=snapshot_data(snapshot),
    )


class SnapshotService:
    """
    Snapshot query service.

    A user sees their own snapshots plus global ones written by runs that
    were not tied to a user.
    """

    def __init__(self, session: Session):
        self.session = session

    def _query(self, integration: IntegrationName, user: User):
        model = SNAPSHOT_MODELS[IntegrationName(integration)]
        return (
            select(model)
            .where(or_(model.user_id == user.id, model.user_id.is_(None)))
            .order_by(model.created_at.desc())
        )

    def get_latest(self, integration: IntegrationName, user: User) -> SnapshotBase:
        """Most recent snapshot, or SnapshotNotFoundError."""
        snapshot = self.session.exec(self._query(integration, user).limit(1)).first()
        if snapshot is None:
            raise SnapshotNotFoundError(f"No {IntegrationName(integration).value} snapshot stored yet")
        return snapshot

    def get_history(self, integration: IntegrationName, user: User, limit: int = 10) -> List[SnapshotBase]:
        """Snapshots newest first, at most ``limit`` (capped at MAX_HISTORY_LIMIT)."""
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
        return list(self.session.exec(self._query(integration, user).limit(limit)).all())
