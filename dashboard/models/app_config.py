"""
Stored application configuration.

One row per user. The document maps an integration name to its settings
section (credentials, usernames, OPML export, ``active`` switch) and is
encrypted with Fernet before storage (core/encryption.py).

Security:
    - Changing SECRET_KEY makes every stored document unreadable
    - Never expose ``config_encrypted`` in API responses
"""
import uuid
from typing import Optional

from sqlalchemy import Column, ForeignKey, Text
from sqlmodel import Field

from .base import BaseModel


class AppConfig(BaseModel, table=True):
    """
    Per-user integration settings document.

    ``user_id`` is nullable so a single-tenant deployment can keep one
    global document that pipelines fall back to.
    """
    __tablename__ = "app_config"

    user_id: Optional[uuid.UUID] = Field(
        default=None,
        sa_column=Column(
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=True,
            unique=True,
            index=True
        )
    )

    config_encrypted: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Fernet-encrypted JSON configuration document"
    )
