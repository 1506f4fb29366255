"""
App configuration service.

Stores each user's integration settings as one encrypted document and
merges updates from the settings UI section by section.
"""
import uuid
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from dashboard.core.encryption import decrypt_document, encrypt_document
from dashboard.core.exceptions import AppConfigNotFoundError
from dashboard.core.logging_config import log_error, log_user_action
from dashboard.core.time_utils import utc_now
from dashboard.models.app_config import AppConfig
from dashboard.models.user import User
from dashboard.schemas.app_config import SETTINGS_MODELS, AppConfigUpdate, describe_validation_error


class AppConfigService:
    """App configuration service class."""

    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, user_id: uuid.UUID) -> Optional[AppConfig]:
        statement = select(AppConfig).where(AppConfig.user_id == user_id)
        return self.session.exec(statement).first()

    def get_config(self, user: User) -> Dict[str, Any]:
        """
        Return the decrypted settings document for a user.

        Raises:
            AppConfigNotFoundError: If the user never saved any settings.
        """
        row = self._get_row(user.id)
        if row is None:
            raise AppConfigNotFoundError("No app configuration stored")
        return decrypt_document(row.config_encrypted)

    def update_config(self, user: User, update: AppConfigUpdate) -> Dict[str, Any]:
        """
        Merge ``update.settings`` into the named integration section.

        Keys not present in the update keep their stored values. The first
        update creates the document.

        Raises:
            ValueError: If the merged section does not fit the integration's
                settings schema. Nothing is stored in that case.
        """
        row = self._get_row(user.id)
        document: Dict[str, Any] = decrypt_document(row.config_encrypted) if row else {}

        section_name = update.app_name.value
        section = dict(document.get(section_name) or {})
        section.update(update.settings)
        try:
            SETTINGS_MODELS[update.app_name].model_validate(section)
        except ValidationError as exc:
            raise ValueError(
                f"Invalid {section_name} settings: {describe_validation_error(exc)}"
            ) from None
        document[section_name] = section

        if row is None:
            row = AppConfig(user_id=user.id, config_encrypted=encrypt_document(document))
        else:
            row.config_encrypted = encrypt_document(document)
            row.updated_at = utc_now()

        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc, user_email=user.email, integration=section_name)
            raise

        log_user_action(user.email, f"updated {section_name} settings", keys=sorted(update.settings))
        return document
