"""
Settings endpoints used by the integration settings page.
"""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlmodel import Session

from dashboard.api.dependencies import get_current_user
from dashboard.core.database import get_session
from dashboard.models.user import User
from dashboard.schemas.app_config import AppConfigResponse, AppConfigUpdate
from dashboard.services.app_config_service import AppConfigService

router = APIRouter(prefix="/app-config", tags=["app-config"])


@router.get(
    "/config",
    response_model=AppConfigResponse,
    responses={404: {"description": "No settings saved yet"}},
)
async def get_config(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    """Return the decrypted settings document of the current user."""
    return AppConfigResponse(config=AppConfigService(session).get_config(current_user))


@router.post("/config", response_model=AppConfigResponse)
async def update_config(
    update: AppConfigUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    """
    Merge ``settings`` into the ``app_name`` section.

    Example body: ``{"app_name": "music", "settings": {"lastFmKey": "...", "active": true}}``
    """
    document = AppConfigService(session).update_config(current_user, update)
    return AppConfigResponse(config=document)
