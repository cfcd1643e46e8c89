"""
Message GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Message:
    """Message type for GraphQL API."""

    id: strawberry.ID
    text: str
    created_at: datetime
    user_id: strawberry.Private[int]

    @strawberry.field
    async def user(
        self, info: strawberry.Info
    ) -> Annotated["User", strawberry.lazy(".user")] | None:
        """Get the author of this message (batched per operation)."""
        from ..resolvers.message import resolve_message_user

        return await resolve_message_user(self, info)


@strawberry.type
class PageInfo:
    has_next_page: bool
    end_cursor: str | None


@strawberry.type
class MessageConnection:
    """A page of messages, newest first."""

    edges: list[Message]
    page_info: PageInfo


@strawberry.type
class MessageCreated:
    message: Message
