# fiesta/realtime.py
import asyncio
import logging
from typing import Any, Dict, Optional

from supabase import AsyncClient, acreate_client

from . import config
from .models import ChatMessage

log = logging.getLogger("uvicorn.error")


def _record(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    data = payload.get("data") or {}
    return data.get("record") or payload.get("new") or payload.get("record")


class MessageFeed:
    """
    New rows in chat_messages for one channel, as they are inserted.

        async with MessageFeed(channel_id) as feed:
            msg = await feed.get()
    """

    def __init__(self, channel_id: str):
        self.channel_id = channel_id
        self.queue: asyncio.Queue[ChatMessage] = asyncio.Queue()
        self._client: Optional[AsyncClient] = None
        self._channel = None

    def _on_insert(self, payload: Dict[str, Any]) -> None:
        row = _record(payload)
        if not row:
            log.warning(f"chat:{self.channel_id} change without a record: {payload}")
            return
        self.queue.put_nowait(ChatMessage.model_validate(row))

    async def __aenter__(self) -> "MessageFeed":
        self._client = await acreate_client(config.supabase_url(), config.service_role_key())
        self._channel = self._client.channel(f"chat:{self.channel_id}")
        self._channel.on_postgres_changes(
            "INSERT",
            callback=self._on_insert,
            table="chat_messages",
            schema="public",
            filter=f"channel_id=eq.{self.channel_id}",
        )
        try:
            await self._channel.subscribe()
        except Exception:
            log.error(f"subscribe to chat:{self.channel_id} failed")
            await self._close()
            raise
        log.info(f"subscribed to chat:{self.channel_id}")
        return self

    async def _close(self) -> None:
        # drops every channel and the realtime socket of this feed's own client
        client, self._client, self._channel = self._client, None, None
        if client is not None:
            await client.remove_all_channels()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._close()
        log.info(f"unsubscribed from chat:{self.channel_id}")

    async def get(self) -> ChatMessage:
        return await self.queue.get()
