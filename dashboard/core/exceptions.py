"""
Custom application exceptions.
"""

class DashboardAppException(Exception):
    """Base exception for the dashboard app."""
    pass


class UserNotFoundError(DashboardAppException):
    """Raised when a user is not found."""
    pass


class UserAlreadyExistsError(DashboardAppException):
    """Raised when a user already exists."""
    pass


class InvalidCredentialsError(DashboardAppException):
    """Raised when credentials are invalid."""
    pass


class UnauthorizedError(DashboardAppException):
    """Raised when user is not authorized."""
    pass


class AppConfigNotFoundError(DashboardAppException):
    """Raised when no stored app configuration exists."""
    pass


class SnapshotNotFoundError(DashboardAppException):
    """Raised when an integration has no stored snapshot yet."""
    pass


# Pipeline failures. Every one of these ends the run without persisting anything.

class PipelineError(DashboardAppException):
    """Base class for failures inside an integration pipeline run."""
    pass


class IntegrationConfigError(PipelineError):
    """Raised when configuration or a required credential is missing."""
    pass


class RemoteCallError(PipelineError):
    """Raised on network failure, non-2xx status or an unparseable body."""
    pass


class PayloadShapeError(PipelineError):
    """Raised when a third-party response lacks the fields a transform needs."""
    pass


class SnapshotPersistenceError(PipelineError):
    """Raised when writing a snapshot fails."""
    pass
