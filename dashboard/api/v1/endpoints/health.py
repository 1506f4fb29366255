"""
Simple health check endpoint.
"""
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from dashboard.core.config import settings
from dashboard.core.database import get_session
from dashboard.core.logging_config import log_error
from dashboard.core.time_utils import utc_now

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Dict[str, Any])
async def health_check(session: Annotated[Session, Depends(get_session)]):
    """
    Health check with database status.

    Returns degraded status if the database is unreachable but the service is running.
    """
    db_status = "connected"
    try:
        session.exec(text("SELECT 1")).first()
    except SQLAlchemyError as e:
        log_error(e, action="health_check")
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
        "version": settings.app_version,
        "database": db_status,
    }
