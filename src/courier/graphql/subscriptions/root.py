"""
Root GraphQL subscription definitions
"""

from collections.abc import AsyncGenerator

import strawberry

from ...pubsub import MESSAGE_CREATED, pubsub
from ..types.message import MessageCreated


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    @strawberry.subscription
    async def message_created(
        self, info: strawberry.Info
    ) -> AsyncGenerator[MessageCreated, None]:
        """Stream every newly created message."""
        async for payload in pubsub.subscribe(MESSAGE_CREATED):
            # Each event is its own unit of work for the batch loader
            info.context.loaders.clear()
            yield MessageCreated(message=payload["message"])
