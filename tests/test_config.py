"""
Tests for settings and database URL resolution
"""

import pytest

from courier.config import Settings, get_database_url, get_secret, is_test_mode


def make_settings(**overrides) -> Settings:
    base = {
        "database_url": None,
        "database_user": None,
        "database_password": None,
        "database_name": None,
        "test_database": None,
        "secret": None,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


def test_full_url_wins_and_gets_async_driver():
    config = make_settings(
        database_url="postgresql://app:pw@db:5432/courier",
        database_name="ignored",
    )

    assert get_database_url(config) == "postgresql+asyncpg://app:pw@db:5432/courier"


def test_heroku_style_postgres_scheme():
    config = make_settings(database_url="postgres://app:pw@db/courier")

    assert get_database_url(config) == "postgresql+asyncpg://app:pw@db/courier"


def test_explicit_driver_is_kept():
    config = make_settings(database_url="postgresql+psycopg://app@db/courier")

    assert get_database_url(config) == "postgresql+psycopg://app@db/courier"


def test_split_fields():
    config = make_settings(
        database_host="db",
        database_user="app",
        database_password="pw",
        database_name="courier",
    )

    assert get_database_url(config) == "postgresql+asyncpg://app:pw@db/courier"


def test_test_database_replaces_name():
    config = make_settings(
        database_host="db",
        database_user="app",
        database_name="courier",
        test_database="courier_test",
    )

    assert get_database_url(config) == "postgresql+asyncpg://app@db/courier_test"
    assert is_test_mode(config)


def test_sqlite_without_name_is_in_memory():
    config = make_settings(database_dialect="sqlite", test_database=":memory:")

    assert get_database_url(config) == "sqlite+aiosqlite://"


def test_not_test_mode_by_default():
    assert not is_test_mode(make_settings())
    assert not is_test_mode(make_settings(test_database=""))


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("COURIER_SECRET", "from-env")
    monkeypatch.setenv("COURIER_TEST_DATABASE", "courier_test")

    config = Settings(_env_file=None)

    assert config.secret == "from-env"
    assert is_test_mode(config)


def test_missing_secret():
    with pytest.raises(ValueError, match="COURIER_SECRET"):
        get_secret(make_settings())
