"""
Resolvers and ORM-to-GraphQL converters
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...dbmodels import Messages, Users
    from ..types.message import Message
    from ..types.user import User


def to_user_type(user: Users) -> User:
    from ..types.user import User

    return User(
        id=str(user.id),
        username=user.username,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


def to_message_type(message: Messages) -> Message:
    from ..types.message import Message

    return Message(
        id=str(message.id),
        text=message.text,
        created_at=message.created_at,
        user_id=message.user_id,
    )
