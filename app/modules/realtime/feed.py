import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional
from app.database.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[Dict[str, Any]], Awaitable[None]]


def extract_record(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Row carried by a postgres change notification"""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    record = data.get("record") or data.get("new")
    return record or None


def _log_handler_failure(future) -> None:
    if not future.cancelled() and future.exception() is not None:
        logger.error(f"Change handler failed: {future.exception()}")


class ChangeFeed:
    """Insert notifications from the Supabase realtime channel API.

    Channel callbacks may fire outside the subscriber's event loop, so each
    one is scheduled back onto the loop that subscribed.
    """

    def __init__(self, client_factory=SupabaseClient.get_async_client):
        self._client_factory = client_factory
        self._channels: Dict[str, Any] = {}

    async def subscribe(
        self,
        table: str,
        handler: ChangeHandler,
        filter: Optional[str] = None,
        event: str = "INSERT"
    ) -> str:
        client = await self._client_factory()
        loop = asyncio.get_running_loop()

        def callback(payload):
            future = asyncio.run_coroutine_threadsafe(handler(payload), loop)
            future.add_done_callback(_log_handler_failure)

        topic = f"{table}-changes-{uuid.uuid4().hex[:8]}"
        channel = client.channel(topic)
        channel.on_postgres_changes(event, callback=callback, table=table, schema="public", filter=filter)
        await channel.subscribe()
        self._channels[topic] = channel
        logger.info(f"Subscribed to {event} on {table} ({filter or 'all rows'}) as {topic}")
        return topic

    async def unsubscribe(self, topic: str) -> None:
        channel = self._channels.pop(topic, None)
        if channel is None:
            return
        client = await self._client_factory()
        try:
            await client.remove_channel(channel)
        except Exception as e:
            logger.warning(f"Error removing channel {topic}: {e}")

    async def close(self) -> None:
        for topic in list(self._channels):
            await self.unsubscribe(topic)


change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    return change_feed
