#!/usr/bin/env python3
"""
Main CLI entry point for the Courier server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from courier import __version__
from courier.config import is_test_mode, settings
from courier.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="courier")
def cli() -> None:
    """Courier CLI - run the server and manage the database."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: COURIER_API_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str | None, port: int | None, reload: bool, log_level: str) -> None:
    """Start the Courier API server."""
    configure_logging(debug=(log_level == "debug"))

    host = host or settings.api_host
    port = port or settings.api_port

    logger.info("Starting Courier API server", host=host, port=port, reload=reload)

    # The app reads settings on import, so pass them through the environment
    os.environ["COURIER_API_HOST"] = host
    os.environ["COURIER_API_PORT"] = str(port)
    if log_level == "debug":
        os.environ["COURIER_DEBUG"] = "true"
    else:
        os.environ.setdefault("COURIER_DEBUG", "false")

    try:
        uvicorn.run(
            "courier.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def db() -> None:
    """Manage the database schema and fixture data."""
    pass


@db.command("reset")
@click.confirmation_option(prompt="This drops every table. Continue?")
def reset_schema() -> None:
    """Drop and recreate all tables."""
    from courier.database import dispose_database, init_database, sync_schema

    configure_logging()

    async def do_reset():
        init_database()
        try:
            await sync_schema(force=True)
        finally:
            await dispose_database()

    try:
        asyncio.run(do_reset())
    except Exception as e:
        logger.error("Schema reset failed", error=str(e))
        click.echo(f"✗ Error resetting schema: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Schema reset")


@db.command("seed")
def seed() -> None:
    """Insert the two fixture users and their messages into the test store."""
    from datetime import UTC, datetime

    from courier.database import (
        dispose_database,
        get_session_factory,
        init_database,
        session_scope,
        sync_schema,
    )
    from courier.database.seed_data import create_users_with_messages

    configure_logging()

    if not is_test_mode():
        click.echo(
            "✗ Fixture data is only written to the test store. Set COURIER_TEST_DATABASE.",
            err=True,
        )
        sys.exit(1)

    async def do_seed():
        init_database()
        try:
            await sync_schema(force=True)
            async with session_scope(get_session_factory()) as session:
                return await create_users_with_messages(session, datetime.now(UTC))
        finally:
            await dispose_database()

    try:
        users = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    for user in users:
        click.echo(f"✓ Seeded user: {user.username} ({user.email})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
