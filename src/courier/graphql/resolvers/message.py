from __future__ import annotations

import base64
from datetime import datetime
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...auth.tokens import SESSION_EXPIRED_MESSAGE
from ...database.connection import session_scope
from ...dbmodels import Messages
from ...errors import AuthenticationError, ForbiddenError, UserInputError
from ...logging import get_logger
from ...pubsub import MESSAGE_CREATED, pubsub
from ..access_control import require_me
from . import to_message_type, to_user_type

if TYPE_CHECKING:
    from ..types.message import Message, MessageConnection
    from ..types.user import User

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100


def to_cursor(created_at: datetime) -> str:
    return base64.urlsafe_b64encode(created_at.isoformat().encode("utf-8")).decode("ascii")


def from_cursor(cursor: str) -> datetime:
    try:
        return datetime.fromisoformat(base64.urlsafe_b64decode(cursor.encode("ascii")).decode())
    except ValueError as e:
        raise UserInputError("Invalid cursor.") from e


# Query resolvers
async def resolve_messages(
    info: strawberry.Info, cursor: str | None, limit: int = DEFAULT_PAGE_SIZE
) -> MessageConnection:
    """
    Resolve a page of messages, newest first.

    The cursor encodes the ``created_at`` of the last edge of the previous
    page; one extra row is fetched to decide whether a next page exists.
    """
    from ..types.message import MessageConnection, PageInfo

    if limit < 1:
        raise UserInputError("Limit has to be a positive number.")

    async with session_scope(info.context.session_factory) as session:
        stmt = select(Messages).order_by(Messages.created_at.desc()).limit(limit + 1)
        if cursor:
            stmt = stmt.where(Messages.created_at < from_cursor(cursor))

        result = await session.execute(stmt)
        messages = list(result.scalars().all())

    has_next_page = len(messages) > limit
    edges = messages[:-1] if has_next_page else messages

    return MessageConnection(
        edges=[to_message_type(message) for message in edges],
        page_info=PageInfo(
            has_next_page=has_next_page,
            end_cursor=to_cursor(edges[-1].created_at) if edges else None,
        ),
    )


async def resolve_message_by_id(info: strawberry.Info, id: int) -> Message | None:
    async with session_scope(info.context.session_factory) as session:
        message = await session.get(Messages, id)
        return to_message_type(message) if message else None


# Field resolvers
async def resolve_message_user(message: Message, info: strawberry.Info) -> User | None:
    user = await info.context.loaders.user_loader.load(message.user_id)
    return to_user_type(user) if user else None


# Mutation resolvers
async def resolve_create_message(info: strawberry.Info, text: str) -> Message:
    me = require_me(info)

    async with session_scope(info.context.session_factory) as session:
        message = Messages(text=text, user_id=me["id"])
        session.add(message)
        try:
            await session.flush()
        except IntegrityError as e:
            # The token outlived its user
            raise AuthenticationError(SESSION_EXPIRED_MESSAGE) from e
        created = to_message_type(message)

    logger.info("Message created", message_id=created.id)
    await pubsub.publish(MESSAGE_CREATED, {"message": created})
    return created


async def resolve_delete_message(info: strawberry.Info, id: int) -> bool:
    me = require_me(info)

    async with session_scope(info.context.session_factory) as session:
        message = await session.get(Messages, id)
        if message is None:
            return False

        if message.user_id != me["id"]:
            raise ForbiddenError("Not authenticated as owner.")

        await session.delete(message)
        logger.info("Message deleted", message_id=id)
        return True
