"""
Current-user endpoints.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from dashboard.api.dependencies import get_current_user
from dashboard.core.database import get_session
from dashboard.core.logging_config import log_user_action
from dashboard.middleware.request_logging import request_id_ctx
from dashboard.models.user import User
from dashboard.schemas.user import PasswordChange, UserResponse, UserUpdate
from dashboard.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]):
    """Profile of the authenticated user."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
async def update_me(
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    user = UserService(session).update_user(str(current_user.id), user_data)
    log_user_action(user.email, "updated profile", request_id=request_id_ctx.get())
    return UserResponse.model_validate(user)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"description": "Current password is incorrect"}},
)
async def change_password(
    data: PasswordChange,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    UserService(session).change_password(str(current_user.id), data)
    log_user_action(current_user.email, "changed password", request_id=request_id_ctx.get())


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
):
    """
    Delete the account together with its stored settings and snapshots.
    """
    email = current_user.email
    UserService(session).delete_user(str(current_user.id))
    log_user_action(email, "deleted account", request_id=request_id_ctx.get())
