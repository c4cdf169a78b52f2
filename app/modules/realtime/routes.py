import asyncio
import logging
from typing import Callable, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool
from app.core.session import SessionContext
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.realtime.feed import ChangeFeed, get_change_feed
from app.modules.realtime.streams import (
    LiveStream, message_feed_stream, classroom_thread_stream,
    event_stream, grade_stream, attendance_stream
)
from supabase import Client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/live", tags=["realtime"])

# application close codes
UNAUTHORIZED = 4401
FORBIDDEN = 4403
INTERNAL_ERROR = 1011


async def _authenticate(websocket: WebSocket, token: str, supabase: Client) -> Optional[SessionContext]:
    try:
        return await run_in_threadpool(AuthService(supabase).resolve_session, token)
    except HTTPException:
        await websocket.close(code=UNAUTHORIZED)
        return None


async def _pump(websocket: WebSocket, stream: LiveStream) -> None:
    while True:
        message = await stream.updates.get()
        await websocket.send_json(message)


async def _serve(
    websocket: WebSocket,
    token: str,
    supabase: Client,
    feed: ChangeFeed,
    build: Callable[[SessionContext], LiveStream]
) -> None:
    """Authenticate, then push snapshots until the client goes away.

    The client may send "refresh" to force a full refetch.
    """
    session = await _authenticate(websocket, token, supabase)
    if session is None:
        return
    try:
        stream = await run_in_threadpool(build, session)
    except HTTPException as e:
        await websocket.close(code=FORBIDDEN if e.status_code == 403 else UNAUTHORIZED, reason=str(e.detail))
        return

    await websocket.accept()
    sender = None
    try:
        await stream.start(feed)
        sender = asyncio.create_task(_pump(websocket, stream))
        while True:
            text = await websocket.receive_text()
            if text.strip().lower() == "refresh":
                await stream.refresh()
    except WebSocketDisconnect:
        logger.info(f"Live {stream.name} closed for {session.user_id}")
    except Exception as e:
        logger.error(f"Live {stream.name} error for {session.user_id}: {e}")
        await websocket.close(code=INTERNAL_ERROR)
    finally:
        if sender is not None:
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)
        await stream.stop(feed)


@router.websocket("/messages")
async def live_messages(
    websocket: WebSocket,
    token: str = Query(...),
    supabase: Client = Depends(get_supabase),
    feed: ChangeFeed = Depends(get_change_feed)
):
    await _serve(websocket, token, supabase, feed, lambda s: message_feed_stream(s, supabase))


@router.websocket("/classrooms/{classroom_id}/messages")
async def live_classroom_messages(
    websocket: WebSocket,
    classroom_id: str,
    token: str = Query(...),
    supabase: Client = Depends(get_supabase),
    feed: ChangeFeed = Depends(get_change_feed)
):
    await _serve(websocket, token, supabase, feed, lambda s: classroom_thread_stream(classroom_id, s, supabase))


@router.websocket("/events")
async def live_events(
    websocket: WebSocket,
    token: str = Query(...),
    supabase: Client = Depends(get_supabase),
    feed: ChangeFeed = Depends(get_change_feed)
):
    await _serve(websocket, token, supabase, feed, lambda s: event_stream(s, supabase))


@router.websocket("/grades")
async def live_grades(
    websocket: WebSocket,
    token: str = Query(...),
    supabase: Client = Depends(get_supabase),
    feed: ChangeFeed = Depends(get_change_feed)
):
    await _serve(websocket, token, supabase, feed, lambda s: grade_stream(s, supabase))


@router.websocket("/attendance")
async def live_attendance(
    websocket: WebSocket,
    token: str = Query(...),
    supabase: Client = Depends(get_supabase),
    feed: ChangeFeed = Depends(get_change_feed)
):
    await _serve(websocket, token, supabase, feed, lambda s: attendance_stream(s, supabase))
