"""Settings — tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from eventix.config import Settings


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/eventix")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/eventix"


def test_empty_database_url_allowed():
    assert Settings(database_url="").database_url == ""


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(ledger_timeout_seconds=0)
    with pytest.raises(ValidationError):
        Settings(registry_operation_timeout_seconds=-1)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LEDGER_BASE_URL", "http://ledger.internal:3002")
    monkeypatch.setenv("REGISTRY_PROBE_TIMEOUT_SECONDS", "2.5")
    settings = Settings()
    assert settings.ledger_base_url == "http://ledger.internal:3002"
    assert settings.registry_probe_timeout_seconds == 2.5
