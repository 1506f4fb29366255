"""
Enums and constants for the application.
"""
from enum import Enum


class UserRole(str, Enum):
    """User roles for access control."""
    ADMIN = "admin"
    USER = "user"


class IntegrationName(str, Enum):
    """
    Third-party integrations that produce snapshots.

    Each value is also the section name in the stored app configuration and
    must have a pipeline registered in dashboard/integrations/service.py.
    """
    MUSIC = "music"
    TRAKT = "trakt"
    FEEDLY = "feedly"
    GOODREADS = "goodreads"


class PipelineStatus(str, Enum):
    """Outcome of a single pipeline run."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
