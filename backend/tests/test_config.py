"""Settings and logging helper tests."""

import pytest
from pydantic import ValidationError

from cms_authz.config import Settings
from cms_authz.exceptions import CmsAuthzError, RoleNotFoundError
from cms_authz.utils.secure_logging import sanitize_exception_message


class TestSettings:
    """Environment driven settings."""

    def test_defaults_use_sqlite(self, monkeypatch):
        monkeypatch.delenv("CMS_AUTHZ_DATABASE_URL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.is_sqlite
        assert settings.async_database_url.startswith("sqlite+aiosqlite://")

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CMS_AUTHZ_LOG_LEVEL", "DEBUG")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_postgres_url_rewritten_for_asyncpg(self):
        settings = Settings(
            _env_file=None,
            database_url="postgresql://cms:secret@db/cms?sslmode=require",
        )

        assert not settings.is_sqlite
        assert settings.async_database_url == "postgresql+asyncpg://cms:secret@db/cms?ssl=require"

    def test_unsupported_scheme_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="mysql://cms@db/cms")

    @pytest.mark.parametrize("field", ["debug", "database_echo"])
    def test_production_forbids_debug_output(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production", **{field: True})


class TestSanitizeExceptionMessage:
    """Exception messages are scrubbed before logging."""

    def test_connection_string_redacted(self):
        error = RuntimeError("could not connect to postgresql://cms:secret@db:5432/cms")

        message = sanitize_exception_message(error)

        assert "secret" not in message

    def test_domain_error_message_kept(self):
        message = sanitize_exception_message(RoleNotFoundError(42))

        assert "42" in message
        assert isinstance(RoleNotFoundError(42), CmsAuthzError)
