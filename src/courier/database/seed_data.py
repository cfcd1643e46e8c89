"""
Fixture data for the ephemeral test store.

Seeding only runs when ``COURIER_TEST_DATABASE`` is set; the schema is then
dropped and recreated before two users and their messages are inserted.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import is_test_mode
from ..dbmodels import Messages, Users
from ..logging import get_logger
from .connection import get_session_factory, session_scope, sync_schema

logger = get_logger(__name__)


def _one_second_apart(start: datetime) -> Iterator[datetime]:
    current = start
    while True:
        current = current + timedelta(seconds=1)
        yield current


async def create_users_with_messages(session: AsyncSession, date: datetime) -> list[Users]:
    """
    Insert the two fixture users with their messages.

    Each message is stamped one second after the previous one, starting one
    second after ``date``.

    Args:
        session: Database session
        date: Base timestamp for the first message

    Returns:
        The created users, in insertion order
    """
    timestamps = _one_second_apart(date)

    robin = Users(
        username="rwieruch",
        email="hello@robin.com",
        password="rwieruch",
        role="ADMIN",
        messages=[
            Messages(text="Published the Road to learn React", created_at=next(timestamps)),
        ],
    )
    session.add(robin)
    await session.flush()

    david = Users(
        username="ddavids",
        email="hello@david.com",
        password="ddavids",
        messages=[
            Messages(text="Happy to release ...", created_at=next(timestamps)),
            Messages(text="Published a complete ...", created_at=next(timestamps)),
        ],
    )
    session.add(david)
    await session.flush()

    logger.info("Seeded fixture users", usernames=[robin.username, david.username])
    return [robin, david]


async def bootstrap(now: datetime | None = None) -> None:
    """Synchronize the schema and, against the test store, reset and seed it."""
    test_mode = is_test_mode()
    await sync_schema(force=test_mode)

    if not test_mode:
        return

    async with session_scope(get_session_factory()) as session:
        await create_users_with_messages(session, now or datetime.now(UTC))
