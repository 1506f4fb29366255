"""
Schemas for the stored integration settings document.

Field names follow the camelCase keys written by the settings UI
(``lastFmKey``, ``spotifySecret`` ...). Sections allow unknown keys so
settings the UI adds later survive a round trip.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dashboard.models.enums import IntegrationName


class IntegrationSettings(BaseModel):
    """Fields common to every integration section."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    active: bool = True


class MusicSettings(IntegrationSettings):
    """last.fm and Spotify credentials."""
    last_fm_key: Optional[str] = Field(default=None, alias="lastFmKey")
    last_fm_username: Optional[str] = Field(default=None, alias="lastFmUsername")
    spotify_id: Optional[str] = Field(default=None, alias="spotifyId")
    spotify_secret: Optional[str] = Field(default=None, alias="spotifySecret")


class TraktSettings(IntegrationSettings):
    """Trakt username and API client id."""
    user: Optional[str] = None
    id: Optional[str] = None


class FeedlySettings(IntegrationSettings):
    """OPML export of the Feedly subscriptions."""
    opml: Optional[str] = None


class GoodreadsSettings(IntegrationSettings):
    """Goodreads developer key and numeric user id."""
    key: Optional[str] = None
    id: Optional[str] = None


SETTINGS_MODELS = {
    IntegrationName.MUSIC: MusicSettings,
    IntegrationName.TRAKT: TraktSettings,
    IntegrationName.FEEDLY: FeedlySettings,
    IntegrationName.GOODREADS: GoodreadsSettings,
}


def describe_validation_error(exc: ValidationError) -> str:
    """
    Summarize a settings ValidationError by field location and error type.

    Never includes the submitted values (``input_value``).
    """
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'} ({error['type']})"
        for error in exc.errors()
    )


class AppConfigData(BaseModel):
    """Whole settings document, one optional section per integration."""
    model_config = ConfigDict(extra="allow")

    music: Optional[MusicSettings] = None
    trakt: Optional[TraktSettings] = None
    feedly: Optional[FeedlySettings] = None
    goodreads: Optional[GoodreadsSettings] = None

    def section(self, name: IntegrationName) -> Optional[IntegrationSettings]:
        return getattr(self, IntegrationName(name).value)


class AppConfigUpdate(BaseModel):
    """Settings UI submission: merge ``settings`` into one section."""
    app_name: IntegrationName
    settings: Dict[str, Any]

    @field_validator('settings')
    @classmethod
    def validate_settings(cls, v):
        if not isinstance(v, dict):
            raise ValueError('settings must be an object')
        return v


class AppConfigResponse(BaseModel):
    """Decrypted settings document as returned to the owner."""
    config: Dict[str, Any]
