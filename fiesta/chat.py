# fiesta/chat.py
import logging
from typing import List, Optional

from .errors import Forbidden, NotFound, ValidationFailed
from .models import ChatChannel, ChatMessage, Role, SessionContext
from .store import RecordStore, first

log = logging.getLogger("uvicorn.error")


class ChatService:
    def __init__(self, store: RecordStore):
        self.store = store

    def get_channel(self, session: SessionContext, channel_id: str) -> ChatChannel:
        row = first(self.store.query("chat_channels", {"id": channel_id}, limit=1))
        if not row:
            raise NotFound("Chat no encontrado")
        channel = ChatChannel.model_validate(row)
        if session.user_id not in (channel.client_id, channel.provider_id):
            raise Forbidden("No participas en este chat")
        return channel

    def open_channel(self, session: SessionContext, request_id: str, provider_id: str) -> ChatChannel:
        """One channel per (request, client, provider); reuse it when it already exists."""
        if session.role != Role.CLIENT:
            raise Forbidden("Solo el cliente puede iniciar un chat")
        key = {"request_id": request_id, "client_id": session.user_id, "provider_id": provider_id}
        row = first(self.store.query("chat_channels", key, limit=1))
        if row:
            return ChatChannel.model_validate(row)
        channel = ChatChannel.model_validate(self.store.create("chat_channels", dict(key)))
        log.info(f"chat channel {channel.id} opened for request {request_id}")
        return channel

    def list_channels(self, session: SessionContext, request_id: Optional[str] = None) -> List[ChatChannel]:
        where = {"request_id": request_id} if request_id else None
        rows = self.store.query(
            "chat_channels",
            where,
            order="created_at",
            desc=True,
            either={"client_id": session.user_id, "provider_id": session.user_id},
        )
        return [ChatChannel.model_validate(r) for r in rows]

    def list_messages(self, session: SessionContext, channel_id: str) -> List[ChatMessage]:
        self.get_channel(session, channel_id)
        rows = self.store.query("chat_messages", {"channel_id": channel_id}, order="created_at", desc=True)
        return [ChatMessage.model_validate(r) for r in rows]

    def send_message(self, session: SessionContext, channel_id: str, content: str) -> ChatMessage:
        text = (content or "").strip()
        if not text:
            raise ValidationFailed("El mensaje está vacío")
        self.get_channel(session, channel_id)
        row = self.store.create("chat_messages", {
            "channel_id": channel_id,
            "sender_id": session.user_id,
            "content": text,
        })
        return ChatMessage.model_validate(row)
