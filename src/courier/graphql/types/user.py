"""
User GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .message import Message


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID
    username: str
    email: str
    role: str | None
    created_at: datetime

    @strawberry.field
    async def messages(
        self, info: strawberry.Info
    ) -> list[Annotated["Message", strawberry.lazy(".message")]]:
        """Get messages written by this user."""
        from ..resolvers.user import resolve_user_messages

        return await resolve_user_messages(self, info)


@strawberry.type
class Token:
    """Signed session token returned by sign-up and sign-in."""

    token: str
