"""Real-time yard notifications using Redis pub/sub."""

import json
import logging
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

import redis
import redis.asyncio as aioredis

from src.config import get_settings

if TYPE_CHECKING:
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)
settings = get_settings()


class YardEventType(StrEnum):
    """Event types pushed to a user's yard channel."""

    # Placement events
    ITEM_PLACED = "item_placed"
    ITEM_RETURNED = "item_returned"
    ITEM_DISCARDED = "item_discarded"
    ITEM_CONSUMED = "item_consumed"

    # Visit events
    CAT_VISITED = "cat_visited"
    HISTORY_READ = "history_read"

    # Economy events
    POINTS_CHANGED = "points_changed"
    INVENTORY_CHANGED = "inventory_changed"


def yard_channel(user_id: int) -> str:
    return f"yard:{user_id}"


# Synchronous Redis client for use in API endpoints and Celery tasks
_sync_redis: redis.Redis | None = None


def get_sync_redis() -> redis.Redis:
    """Get synchronous Redis client for publishing."""
    global _sync_redis
    if _sync_redis is None:
        _sync_redis = redis.from_url(settings.redis_url)
    return _sync_redis


def publish_yard_event(user_id: int, event_type: YardEventType, data: dict | None = None) -> None:
    """Publish an event to a user's yard channel.

    Called after the triggering change has been committed. Delivery is best
    effort; clients reconcile by re-reading the yard.

    Args:
        user_id: Owner of the yard
        event_type: Type of event (item_placed, cat_visited, etc.)
        data: Optional event payload
    """
    try:
        redis_client = get_sync_redis()
        channel = yard_channel(user_id)
        message = {
            "type": event_type,
            "user_id": user_id,
            "timestamp": datetime.now(UTC).isoformat(),
            "data": data or {},
        }
        redis_client.publish(channel, json.dumps(message, default=str))
        logger.debug(f"Published {event_type} to {channel}")
    except Exception as e:
        # Don't fail the request if pub/sub fails
        logger.error(f"Failed to publish yard event: {e}")


class RealtimeService:
    """Async Redis pub/sub service for WebSocket connections."""

    def __init__(self) -> None:
        self._redis: aioredis.Redis | None = None
        self._pubsub: PubSub | None = None

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(settings.redis_url)
        return self._redis

    async def subscribe(self, channel: str) -> AsyncIterator[dict]:
        """Subscribe to a Redis channel and yield messages."""
        redis_conn = await self._get_redis()
        self._pubsub = redis_conn.pubsub()
        await self._pubsub.subscribe(channel)

        try:
            async for message in self._pubsub.listen():
                if message["type"] == "message":
                    try:
                        yield json.loads(message["data"])
                    except json.JSONDecodeError:
                        logger.warning(f"Invalid JSON in pub/sub message: {message['data']}")
        finally:
            if self._pubsub:
                await self._pubsub.unsubscribe(channel)

    async def cleanup(self) -> None:
        """Clean up Redis connections."""
        if self._pubsub:
            await self._pubsub.close()
        if self._redis:
            await self._redis.close()
