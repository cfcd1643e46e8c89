"""
In-process publish/subscribe for GraphQL subscriptions
"""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

MESSAGE_CREATED = "MESSAGE_CREATED"


class PubSub:
    """Fan out published payloads to every live subscriber of a topic.

    Each subscriber owns a bounded queue. Publishing never waits on a
    subscriber: when a queue is full the event is dropped for that subscriber
    only, so one stalled client cannot hold up the publishing operation.
    """

    def __init__(self, max_queue_size: int = 100) -> None:
        self._topics: dict[str, list[asyncio.Queue[dict[str, Any]]]] = {}
        self.max_queue_size = max_queue_size

    def subscriber_count(self, topic: str) -> int:
        return len(self._topics.get(topic, []))

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        dropped = 0
        for queue in list(self._topics.get(topic, [])):
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                dropped += 1

        if dropped:
            logger.warning("Dropped event for stalled subscribers", topic=topic, dropped=dropped)
        logger.debug("Published event", topic=topic, subscribers=self.subscriber_count(topic))

    async def subscribe(self, topic: str) -> AsyncGenerator[dict[str, Any], None]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self.max_queue_size)
        self._topics.setdefault(topic, []).append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._topics[topic].remove(queue)
            if not self._topics[topic]:
                del self._topics[topic]


pubsub = PubSub()
