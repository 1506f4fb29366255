"""
Unit tests for dashboard.core.config settings validation.
"""
import pytest
from pydantic import ValidationError

from dashboard.core.config import DEFAULT_SQLITE_URL, Settings

SECRET = "test-secret-key-for-testing-only-32-chars"


def make_settings(**kwargs):
    """Create Settings without loading values from .env."""
    kwargs.setdefault("secret_key", SECRET)
    return Settings(_env_file=None, **kwargs)


class TestDatabaseUrl:

    def test_blank_url_falls_back_to_sqlite(self):
        settings = make_settings(database_url="  ")
        assert settings.database_url == DEFAULT_SQLITE_URL
        assert settings.database_type == "sqlite"

    def test_postgres_url(self):
        settings = make_settings(database_url="postgresql://dash:pw@db:5432/dashboard")
        assert settings.database_type == "postgresql"


class TestSecretKey:

    def test_missing_secret_key_generated_outside_production(self):
        settings = make_settings(environment="development", secret_key="")
        assert len(settings.secret_key) >= 32

    def test_missing_secret_key_rejected_in_production(self):
        with pytest.raises(ValidationError, match="SECRET_KEY must be set in production"):
            make_settings(environment="production", secret_key="")


class TestCorsOrigins:

    def test_comma_separated_string(self):
        settings = make_settings(cors_origins="https://a.example.com, https://b.example.com")
        assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]

    def test_none_is_empty_list(self):
        assert make_settings(cors_origins=None).cors_origins == []


class TestCeleryUrls:

    def test_default_to_redis_url(self):
        settings = make_settings(
            redis_url="redis://redis:6379/0",
            celery_broker_url=None,
            celery_result_backend=None,
        )
        assert settings.celery_broker_url == "redis://redis:6379/0"
        assert settings.celery_result_backend == "redis://redis:6379/0"

    def test_explicit_broker_wins(self):
        settings = make_settings(redis_url="redis://redis:6379/0", celery_broker_url="redis://other:6379/1")
        assert settings.celery_broker_url == "redis://other:6379/1"


class TestIntegrationSettings:

    def test_sync_interval_must_be_positive(self):
        with pytest.raises(ValidationError, match="INTEGRATION_SYNC_INTERVAL_HOURS must be positive"):
            make_settings(integration_sync_interval_hours=0)

    def test_http_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="HTTP_TIMEOUT_SECONDS must be positive"):
            make_settings(http_timeout_seconds=-1)


class TestProductionValidation:

    def test_debug_rejected(self):
        with pytest.raises(ValidationError, match="DEBUG must be False in production"):
            make_settings(environment="production", debug=True)

    def test_wildcard_cors_rejected(self):
        with pytest.raises(ValidationError, match="Wildcard"):
            make_settings(environment="production", enable_cors=True, cors_origins=["*"])

    def test_valid_production_settings(self):
        settings = make_settings(
            environment="production",
            database_url="postgresql://dash:pw@db:5432/dashboard",
            celery_broker_url="redis://redis:6379/0",
        )
        assert settings.environment == "production"
