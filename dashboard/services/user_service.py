"""
User service for account management.
"""
import time
import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from dashboard.core.config import settings
from dashboard.core.exceptions import (
    InvalidCredentialsError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from dashboard.core.logging_config import log_error, log_info, log_warning
from dashboard.core.security import get_password_hash, verify_password
from dashboard.core.time_utils import utc_now
from dashboard.models.enums import UserRole
from dashboard.models.user import User
from dashboard.schemas.user import PasswordChange, UserCreate, UserUpdate

# Hash evaluated once to keep timing consistent for missing users
_DUMMY_PASSWORD_HASH = get_password_hash("dashboard-dummy-password")


class UserService:
    """User service class."""

    def __init__(self, session: Session):
        self.session = session

    def is_first_user(self) -> bool:
        """Check whether the user table is still empty."""
        count = self.session.exec(select(func.count(User.id))).one() or 0
        return count == 0

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        try:
            user_uuid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        return self.session.exec(select(User).where(User.id == user_uuid)).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        statement = select(User).where(User.email == email.lower().strip())
        return self.session.exec(statement).first()

    def is_signup_disabled(self) -> bool:
        return settings.disable_signup

    def create_user(self, user_data: UserCreate) -> User:
        """
        Create a new user.

        The first account created on an empty database becomes admin.
        """
        if self.get_user_by_email(user_data.email):
            raise UserAlreadyExistsError("Email already registered")

        is_first = self.is_first_user()
        user = User(
            email=user_data.email,
            password=get_password_hash(user_data.password),
            name=user_data.name,
            role=UserRole.ADMIN if is_first else UserRole.USER,
        )

        self.session.add(user)
        try:
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as exc:
            self.session.rollback()
            raise UserAlreadyExistsError("Email already registered") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc, user_email=user_data.email)
            raise

        if is_first:
            log_info(f"First user created as admin: {user.email}")
        return user

    def update_user(self, user_id: str, user_data: UserUpdate) -> User:
        """Update profile fields."""
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundError("User not found")

        if user_data.name is not None:
            user.name = user_data.name
        user.updated_at = utc_now()
        return self._save(user)

    def change_password(self, user_id: str, data: PasswordChange) -> User:
        """Replace the password after checking the current one."""
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundError("User not found")

        if not verify_password(data.current_password, user.password):
            log_warning(f"Password change failed for {user.email}: current password mismatch")
            raise InvalidCredentialsError("Current password is incorrect")

        user.password = get_password_hash(data.new_password)
        user.updated_at = utc_now()
        return self._save(user)

    def delete_user(self, user_id: str) -> bool:
        """
        Permanently delete a user.

        Stored configuration and snapshots go with it through the
        ``ON DELETE CASCADE`` foreign keys.
        """
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundError("User not found")

        user_email = user.email
        self.session.delete(user)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc, user_email=user_email)
            raise

        log_info(f"User deleted: {user_email}")
        return True

    def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate user with email and password."""
        user = self.get_user_by_email(email)
        if not user:
            # Dummy verify keeps response time independent of the email
            verify_password(password, _DUMMY_PASSWORD_HASH)
            time.sleep(0.05)
            raise InvalidCredentialsError("Incorrect email or password")

        if not verify_password(password, user.password):
            time.sleep(0.05)
            raise InvalidCredentialsError("Incorrect email or password")

        if not user.is_active:
            raise UnauthorizedError("User account is inactive")

        return user

    def record_login(self, user: User) -> User:
        user.last_login_at = utc_now()
        return self._save(user)

    def _save(self, user: User) -> User:
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc, user_email=user.email)
            raise
        return user
