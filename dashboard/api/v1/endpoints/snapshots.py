"""
Read-only snapshot endpoints for the dashboard.

No endpoint triggers a pipeline run; runs come from Celery beat or the
admin CLI.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from dashboard.api.dependencies import get_current_user
from dashboard.core.database import get_session
from dashboard.models.enums import IntegrationName
from dashboard.models.user import User
from dashboard.schemas.snapshot import SnapshotListResponse, SnapshotResponse
from dashboard.services.snapshot_service import MAX_HISTORY_LIMIT, SnapshotService, to_response

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


@router.get(
    "/{integration}/latest",
    response_model=SnapshotResponse,
    responses={404: {"description": "No snapshot stored yet"}},
)
async def get_latest_snapshot(
    integration: IntegrationName,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    snapshot = SnapshotService(session).get_latest(integration, current_user)
    return to_response(integration, snapshot)


@router.get("/{integration}", response_model=SnapshotListResponse)
async def list_snapshots(
    integration: IntegrationName,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=MAX_HISTORY_LIMIT)] = 10,
):
    """Snapshot history, newest first."""
    snapshots = SnapshotService(session).get_history(integration, current_user, limit=limit)
    items = [to_response(integration, s) for s in snapshots]
    return SnapshotListResponse(integration=integration, items=items, count=len(items))
