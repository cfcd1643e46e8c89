"""
Root GraphQL query definitions
"""

import strawberry

from ..types.message import Message, MessageConnection
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.user import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """Get all users."""
        from ..resolvers.user import resolve_users

        return await resolve_users(info)

    @strawberry.field
    async def user(self, info: strawberry.Info, id: strawberry.ID) -> User | None:
        """Get a user by ID."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, int(id))

    @strawberry.field
    async def messages(
        self,
        info: strawberry.Info,
        cursor: str | None = None,
        limit: int | None = 100,
    ) -> MessageConnection:
        """Get messages, newest first, one page at a time."""
        from ..resolvers.message import DEFAULT_PAGE_SIZE, resolve_messages

        return await resolve_messages(
            info, cursor, DEFAULT_PAGE_SIZE if limit is None else limit
        )

    @strawberry.field
    async def message(self, info: strawberry.Info, id: strawberry.ID) -> Message | None:
        """Get a message by ID."""
        from ..resolvers.message import resolve_message_by_id

        return await resolve_message_by_id(info, int(id))
