"""
Persister: inserts one snapshot row per successful pipeline run.
"""
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.database import session_commit, session_rollback
from dashboard.core.exceptions import SnapshotPersistenceError
from dashboard.models.snapshot import SnapshotBase


async def save_snapshot(session: Session | AsyncSession, snapshot: SnapshotBase) -> uuid.UUID:
    """
    Insert ``snapshot`` and return its id once the commit succeeded.

    The id is generated client-side, so no read-back follows the commit.

    Raises:
        SnapshotPersistenceError: The transaction was rolled back.
    """
    snapshot_id = snapshot.id
    try:
        session.add(snapshot)
        await session_commit(session)
    except SQLAlchemyError as exc:
        await session_rollback(session)
        raise SnapshotPersistenceError(
            f"Could not store {type(snapshot).__name__}: {exc.__class__.__name__}"
        ) from exc
    return snapshot_id
