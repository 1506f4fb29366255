"""
Config Provider: reads the stored settings document for pipeline runs.

Pipelines never write configuration; it changes only through the
settings endpoints.
"""
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlmodel import Session, select
from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.database import session_exec
from dashboard.core.encryption import decrypt_document
from dashboard.core.exceptions import IntegrationConfigError
from dashboard.core.logging_config import log_warning
from dashboard.models.app_config import AppConfig
from dashboard.models.enums import IntegrationName
from dashboard.schemas.app_config import AppConfigData, IntegrationSettings, describe_validation_error


@dataclass(frozen=True)
class LoadedConfig:
    """A decrypted settings document and the user it belongs to."""
    user_id: Optional[uuid.UUID]
    data: AppConfigData


def parse_document(document: dict) -> AppConfigData:
    try:
        return AppConfigData.model_validate(document)
    except ValidationError as exc:
        raise IntegrationConfigError(
            f"Stored app configuration is malformed: {describe_validation_error(exc)}"
        ) from None


async def load_config(
    session: Session | AsyncSession,
    user_id: Optional[uuid.UUID] = None,
) -> LoadedConfig:
    """
    Return the current configuration.

    With ``user_id`` the user's own document is loaded; without one the most
    recently updated document is used.

    Raises:
        IntegrationConfigError: If no document exists or it cannot be decrypted.
    """
    statement = select(AppConfig)
    if user_id is not None:
        statement = statement.where(AppConfig.user_id == user_id)
    else:
        statement = statement.order_by(AppConfig.updated_at.desc())

    row = (await session_exec(session, statement.limit(1))).first()
    if row is None:
        if user_id is not None:
            raise IntegrationConfigError(f"No app configuration stored for user {user_id}")
        raise IntegrationConfigError("No app configuration stored")

    try:
        document = decrypt_document(row.config_encrypted)
    except ValueError as exc:
        raise IntegrationConfigError(str(exc)) from exc

    return LoadedConfig(user_id=row.user_id, data=parse_document(document))


async def list_configs(session: Session | AsyncSession) -> List[LoadedConfig]:
    """
    Every readable stored document, oldest first.

    Documents that cannot be decrypted or parsed are logged and skipped.
    """
    rows = (await session_exec(session, select(AppConfig).order_by(AppConfig.created_at))).all()
    configs = []
    for row in rows:
        try:
            data = parse_document(decrypt_document(row.config_encrypted))
        except (ValueError, IntegrationConfigError) as exc:
            log_warning("Skipping unreadable app configuration", user_id=row.user_id, error=str(exc))
            continue
        configs.append(LoadedConfig(user_id=row.user_id, data=data))
    return configs


def get_section(config: AppConfigData, integration: IntegrationName) -> IntegrationSettings:
    """The settings section for an integration, or IntegrationConfigError."""
    section = config.section(integration)
    if section is None:
        raise IntegrationConfigError(f"No {IntegrationName(integration).value} settings configured")
    return section


def require(value: Any, message: str) -> Any:
    """Return ``value`` or raise IntegrationConfigError(message) if it is blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise IntegrationConfigError(message)
    return value
