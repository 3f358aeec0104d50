# fiesta/routers/chats.py
import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from ..auth import verify_token
from ..chat import ChatService
from ..deps import get_session, get_store
from ..errors import WorkflowError, http_error
from ..models import ChannelIn, ChatChannel, ChatMessage, MessageIn, SessionContext
from ..realtime import MessageFeed
from ..store import RecordStore

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get("", response_model=List[ChatChannel])
def list_channels(
    request_id: Optional[str] = Query(default=None),
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ChatService(store).list_channels(session, request_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/chats GET failed: {e}")


@router.post("", response_model=ChatChannel)
def open_channel(
    payload: ChannelIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ChatService(store).open_channel(session, payload.request_id, payload.provider_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/chats POST failed: {e}")


@router.get("/{channel_id}/messages", response_model=List[ChatMessage])
def list_messages(
    channel_id: str,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ChatService(store).list_messages(session, channel_id)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/chats/{channel_id}/messages GET failed: {e}")


@router.post("/{channel_id}/messages", response_model=ChatMessage, status_code=201)
def send_message(
    channel_id: str,
    payload: MessageIn,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return ChatService(store).send_message(session, channel_id, payload.content)
    except WorkflowError as e:
        raise http_error(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"/chats/{channel_id}/messages POST failed: {e}")


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


# ──────────────────────────────────────────────────────────────────────────────
# WS /chats/{id}/ws?token=... — pushes each new message of the channel
# ──────────────────────────────────────────────────────────────────────────────
@router.websocket("/{channel_id}/ws")
async def stream_messages(
    websocket: WebSocket,
    channel_id: str,
    token: str = Query(default=""),
):
    try:
        session = await run_in_threadpool(verify_token, token)
        store = get_store()
        await run_in_threadpool(ChatService(store).get_channel, session, channel_id)
    except (HTTPException, WorkflowError) as e:
        log.info(f"chat:{channel_id} websocket refused: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    async with MessageFeed(channel_id) as feed:
        closed = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            while True:
                incoming = asyncio.create_task(feed.get())
                done, _ = await asyncio.wait({incoming, closed}, return_when=asyncio.FIRST_COMPLETED)
                if closed in done:
                    incoming.cancel()
                    break
                await websocket.send_json(incoming.result().model_dump(mode="json"))
        finally:
            closed.cancel()
