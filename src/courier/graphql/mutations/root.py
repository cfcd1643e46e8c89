"""
Root GraphQL mutation definitions
"""

import strawberry

from ..access_control import IsAdmin, IsAuthenticated
from ..types.message import Message
from ..types.user import Token, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # User mutations
    @strawberry.mutation
    async def sign_up(
        self, info: strawberry.Info, username: str, email: str, password: str
    ) -> Token:
        """Create a user and return a session token."""
        from ..resolvers.auth import resolve_sign_up

        return await resolve_sign_up(info, username, email, password)

    @strawberry.mutation
    async def sign_in(self, info: strawberry.Info, login: str, password: str) -> Token:
        """Exchange a username or email and password for a session token."""
        from ..resolvers.auth import resolve_sign_in

        return await resolve_sign_in(info, login, password)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def update_user(self, info: strawberry.Info, username: str) -> User:
        """Rename the current user."""
        from ..resolvers.user import resolve_update_user

        return await resolve_update_user(info, username)

    @strawberry.mutation(permission_classes=[IsAuthenticated, IsAdmin])
    async def delete_user(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete a user and their messages (admin only)."""
        from ..resolvers.user import resolve_delete_user

        return await resolve_delete_user(info, int(id))

    # Message mutations
    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def create_message(self, info: strawberry.Info, text: str) -> Message:
        """Post a message as the current user."""
        from ..resolvers.message import resolve_create_message

        return await resolve_create_message(info, text)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def delete_message(self, info: strawberry.Info, id: strawberry.ID) -> bool:
        """Delete one of the current user's messages."""
        from ..resolvers.message import resolve_delete_message

        return await resolve_delete_message(info, int(id))
