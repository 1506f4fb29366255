"""
User model.
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import field_validator, EmailStr
from sqlalchemy import Column, Enum as SQLAlchemyEnum, text
from sqlmodel import Field, Index, CheckConstraint, String

from .base import BaseModel
from .enums import UserRole


class User(BaseModel, table=True):
    """
    Dashboard account.
    """
    __tablename__ = "user"

    email: EmailStr = Field(
        sa_column=Column(String(255), unique=True, nullable=False)
    )
    password: str = Field(..., min_length=8)  # Hashed password
    name: str = Field(..., max_length=100, sa_column=Column(String(100), nullable=False))
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=Column(
            SQLAlchemyEnum(
                UserRole,
                name="user_role_enum",
                native_enum=True,
                values_callable=lambda x: [e.value for e in x]
            ),
            nullable=False,
            server_default=text("'user'")
        )
    )
    is_active: bool = Field(default=True)
    last_login_at: Optional[datetime] = None

    __table_args__ = (
        Index('idx_user_active', 'is_active'),
        CheckConstraint("length(name) > 0", name='check_name_not_empty'),
    )

    @field_validator('role', mode='before')
    @classmethod
    def validate_role(cls, v: Union[str, UserRole]) -> UserRole:
        """Coerce string role values to UserRole enum."""
        if isinstance(v, UserRole):
            return v
        if isinstance(v, str):
            try:
                return UserRole(v)
            except ValueError as exc:
                raise ValueError(
                    f"Invalid role: {v}. Must be one of: {[r.value for r in UserRole]}"
                ) from exc
        raise ValueError(f"Role must be a string or UserRole enum, got {type(v)}")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return v
        return str(v).lower().strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Name cannot be empty')
        return v.strip()
