"""
Authentication endpoints.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from jose import JWTError
from sqlmodel import Session

from dashboard.core.database import get_session
from dashboard.core.exceptions import InvalidCredentialsError, UnauthorizedError
from dashboard.core.logging_config import log_error, log_user_action, log_warning
from dashboard.core.rate_limiting import auth_rate_limit
from dashboard.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from dashboard.middleware.request_logging import request_id_ctx
from dashboard.schemas.auth import LoginResponse, Token, TokenRefresh, UserLogin
from dashboard.schemas.user import UserCreate, UserResponse
from dashboard.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Sign up is disabled"},
        409: {"description": "Email already registered"},
        429: {"description": "Too many requests"},
    }
)
@auth_rate_limit("register")
async def register(
    request: Request,
    user_data: UserCreate,
    session: Annotated[Session, Depends(get_session)]
):
    """
    Register a new user account.

    The first account on an empty instance becomes admin and can always be
    created, even with DISABLE_SIGNUP set.
    """
    user_service = UserService(session)

    if not user_service.is_first_user() and user_service.is_signup_disabled():
        log_warning("Signup rejected because signup is disabled", user_email=user_data.email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Sign up is disabled")

    user = user_service.create_user(user_data)
    log_user_action(user.email, "registered", request_id=request_id_ctx.get())
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Incorrect email or password"},
        429: {"description": "Too many requests"},
    }
)
@auth_rate_limit("login")
async def login(
    request: Request,
    user_data: UserLogin,
    session: Annotated[Session, Depends(get_session)]
):
    """
    Login with email and password.

    Returns access token, refresh token, and user information.
    """
    user_service = UserService(session)
    try:
        user = user_service.authenticate_user(user_data.email, user_data.password)
    except (InvalidCredentialsError, UnauthorizedError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    user = user_service.record_login(user)
    access_token = create_access_token(data={"sub": str(user.id)})
    refresh_token = create_refresh_token(data={"sub": str(user.id)})

    log_user_action(user.email, "logged in", request_id=request_id_ctx.get())
    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse.model_validate(user).model_dump(mode="json"),
    )


@router.post(
    "/refresh",
    response_model=Token,
    responses={
        401: {"description": "Invalid or expired refresh token"},
        429: {"description": "Too many requests"},
    }
)
@auth_rate_limit("refresh")
async def refresh_token(
    request: Request,
    token_data: TokenRefresh,
    session: Annotated[Session, Depends(get_session)]
):
    """
    Exchange a refresh token for a new access token.

    The refresh token is not rotated, so users log in again once it expires.
    """
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = verify_token(token_data.refresh_token, REFRESH_TOKEN_TYPE)
    except JWTError as e:
        log_error(e, request_id=request_id_ctx.get(), action="token_refresh")
        raise invalid from None

    user = UserService(session).get_user_by_id(payload.get("sub") or "")
    if user is None or not user.is_active:
        raise invalid

    return Token(access_token=create_access_token(data={"sub": str(user.id)}))
