"""
Base classes shared by all table models.
"""
import uuid
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from dashboard.core.time_utils import utc_now


class TimestampMixin(SQLModel):
    """Adds created/updated timestamps (UTC)."""

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )


class BaseModel(TimestampMixin):
    """Table base with a UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
