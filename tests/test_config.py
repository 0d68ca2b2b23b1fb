"""Tests for environment-driven settings."""

import pytest

from rolodex.infrastructure import Settings


def test_defaults_build_mysql_url():
    settings = Settings.from_env({"DB_HOST": "db.internal", "DB_USER": "app", "DB_PASSWORD": "pw", "DB_NAME": "phonebook"})
    assert settings.database_url == "mysql+pymysql://app:pw@db.internal:3306/phonebook?charset=utf8mb4"
    assert settings.pool_size == 10
    assert settings.query_timeout == 10.0
    assert settings.probe_attempts == 3
    assert settings.probe_delay == 3.0
    assert settings.api_key is None
    assert settings.port == 3000
    assert settings.table_name == "contacts"


def test_database_url_wins():
    settings = Settings.from_env({"DATABASE_URL": "sqlite:///x.db", "DB_HOST": "ignored"})
    assert settings.database_url == "sqlite:///x.db"


def test_overrides():
    settings = Settings.from_env({
        "DATABASE_URL": "sqlite:///x.db",
        "DB_POOL_SIZE": "4",
        "DB_QUERY_TIMEOUT": "2.5",
        "DB_CREATE_SCHEMA": "true",
        "API_KEY": "secret",
        "LOG_LEVEL": "debug",
    })
    assert settings.pool_size == 4
    assert settings.query_timeout == 2.5
    assert settings.create_schema is True
    assert settings.api_key == "secret"
    assert settings.log_level == "DEBUG"


def test_malformed_number_names_variable():
    with pytest.raises(ValueError, match="DB_POOL_SIZE"):
        Settings.from_env({"DATABASE_URL": "sqlite://", "DB_POOL_SIZE": "ten"})


def test_log_level_from_settings_applies_to_root(monkeypatch):
    import logging

    from rolodex.infrastructure import configure_logging

    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)
    settings = Settings.from_env({"DATABASE_URL": "sqlite://", "LOG_LEVEL": " debug "})
    configure_logging(settings.log_level)
    assert root.level == logging.DEBUG
    configure_logging("WARNING")
    assert root.level == logging.WARNING
