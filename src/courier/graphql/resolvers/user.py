from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...database.connection import session_scope
from ...dbmodels import Messages, Users
from ...errors import ModelValidationError, UserInputError
from ...logging import get_logger
from ..access_control import get_me_from_info, require_me
from . import to_message_type, to_user_type

if TYPE_CHECKING:
    from ..types.message import Message
    from ..types.user import User

logger = get_logger(__name__)


async def resolve_current_user(info: strawberry.Info) -> User | None:
    me = get_me_from_info(info)
    if me is None:
        return None

    async with session_scope(info.context.session_factory) as session:
        user = await session.get(Users, me["id"])
        return to_user_type(user) if user else None


async def resolve_users(info: strawberry.Info) -> list[User]:
    async with session_scope(info.context.session_factory) as session:
        result = await session.execute(select(Users).order_by(Users.id))
        return [to_user_type(user) for user in result.scalars().all()]


async def resolve_user_by_id(info: strawberry.Info, id: int) -> User | None:
    async with session_scope(info.context.session_factory) as session:
        user = await session.get(Users, id)
        return to_user_type(user) if user else None


async def resolve_user_messages(user: User, info: strawberry.Info) -> list[Message]:
    async with session_scope(info.context.session_factory) as session:
        stmt = (
            select(Messages)
            .where(Messages.user_id == int(user.id))
            .order_by(Messages.created_at, Messages.id)
        )
        result = await session.execute(stmt)
        return [to_message_type(message) for message in result.scalars().all()]


async def resolve_update_user(info: strawberry.Info, username: str) -> User:
    me = require_me(info)

    async with session_scope(info.context.session_factory) as session:
        user = await session.get(Users, me["id"])
        if user is None:
            raise UserInputError("No user found with this id.")

        user.username = username
        try:
            await session.flush()
        except IntegrityError as e:
            raise ModelValidationError("must be unique") from e

        logger.info("User updated", user_id=user.id)
        return to_user_type(user)


async def resolve_delete_user(info: strawberry.Info, id: int) -> bool:
    async with session_scope(info.context.session_factory) as session:
        user = await session.get(Users, id)
        if user is None:
            return False

        await session.delete(user)
        logger.info("User deleted", user_id=id)
        return True
