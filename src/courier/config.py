"""
Configuration management for Courier
"""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

# Async drivers used when a URL or dialect does not name one
ASYNC_DRIVERS = {
    "postgresql": "asyncpg",
    "postgres": "asyncpg",
    "sqlite": "aiosqlite",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database: either a full URL or the split fields below
    database_url: str | None = None
    database_dialect: str = "postgresql"
    database_host: str = "localhost"
    database_port: int | None = None
    database_user: str | None = None
    database_password: str | None = None
    database_name: str | None = None
    database_pool_size: int = 10
    database_max_overflow: int = 20
    sql_echo: bool = False

    # Ephemeral test store: replaces database_name and triggers reset + seed
    test_database: str | None = None

    # Auth
    secret: str | None = None
    jwt_algorithm: str = "HS256"
    token_expiry_minutes: int = 30
    token_header: str = "x-token"

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False
    cors_origins: list[str] = ["*"]

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "COURIER_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()


def _with_async_driver(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if not sep or "+" in scheme:
        return url
    driver = ASYNC_DRIVERS.get(scheme)
    if driver is None:
        return url
    if scheme == "postgres":
        scheme = "postgresql"
    return f"{scheme}+{driver}://{rest}"


def is_test_mode(config: Settings | None = None) -> bool:
    """Whether the ephemeral test store is selected."""
    config = config or settings
    return bool(config.test_database)


def get_database_url(config: Settings | None = None) -> str:
    """Build the async database URL from settings.

    A full ``database_url`` wins over the split host/user/password/name fields.
    With the split fields, ``test_database`` takes the place of ``database_name``.
    """
    config = config or settings

    if config.database_url:
        return _with_async_driver(config.database_url)

    dialect = config.database_dialect
    if "+" not in dialect:
        driver = ASYNC_DRIVERS.get(dialect)
        if driver:
            dialect = f"{dialect}+{driver}"

    database = config.test_database or config.database_name

    if dialect.startswith("sqlite"):
        # No name (or ":memory:") means an in-memory store
        url = URL.create(dialect, database=None if database == ":memory:" else database)
        return url.render_as_string(hide_password=False)

    url = URL.create(
        dialect,
        username=config.database_user,
        password=config.database_password,
        host=config.database_host,
        port=config.database_port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


def get_secret(config: Settings | None = None) -> str:
    """Return the token signing secret."""
    config = config or settings
    if not config.secret:
        raise ValueError("Token secret is required. Set COURIER_SECRET.")
    return config.secret
