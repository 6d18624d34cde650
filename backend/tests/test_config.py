"""Settings — verifies database URL resolution from environment variables."""

import pytest
from pydantic import ValidationError

from app.config import Settings

POSTGRES_VARS = (
    "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_DATABASE",
)


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    for var in POSTGRES_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_database_url_converted_for_asyncpg(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql://u:p@host:5432/db")
    settings = Settings(_env_file=None)
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_other_drivers_left_untouched(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///local.db")
    assert Settings(_env_file=None).database_url == "sqlite+aiosqlite:///local.db"


def test_database_url_built_from_postgres_variables(clean_env):
    clean_env.setenv("POSTGRES_USER", "user")
    clean_env.setenv("POSTGRES_PASSWORD", "secret")
    clean_env.setenv("POSTGRES_HOST", "db")
    clean_env.setenv("POSTGRES_DATABASE", "dash")
    settings = Settings(_env_file=None)
    assert settings.database_url == "postgresql+asyncpg://user:secret@db:5432/dash"


def test_missing_database_configuration_fails_fast(clean_env):
    clean_env.setenv("POSTGRES_USER", "user")
    with pytest.raises(ValidationError, match="Missing required environment variables"):
        Settings(_env_file=None)


def test_defaults(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///local.db")
    clean_env.delenv("LOG_FORMAT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_pool_size == 20
    assert settings.database_max_overflow == 10
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
