"""
Authentication schemas.
"""
from typing import Optional

from pydantic import BaseModel, field_validator


class Token(BaseModel):
    """
    Token response schema.

    refresh_token is only included at login; refreshing returns a new
    access token alone so sessions eventually require a fresh login.
    """
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"


class LoginResponse(BaseModel):
    """Login response schema with tokens and user info."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: dict


class UserLogin(BaseModel):
    """User login schema."""
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v and '@' not in v:
            raise ValueError('Invalid email address')
        return v.lower().strip() if v else v


class TokenRefresh(BaseModel):
    """Token refresh schema."""
    refresh_token: str
