from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.messages.schemas import MessageCreate, MessageResponse, RecipientResponse
from app.modules.messages.service import MessageService
from app.core.dependencies import require_permission, check_classroom_access
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_supabase)) -> MessageService:
    return MessageService(supabase)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    message_data: MessageCreate,
    session: SessionContext = Depends(require_permission("messages:create")),
    service: MessageService = Depends(get_message_service)
):
    """Send an announcement or a private message"""
    return service.send_message(message_data, session)


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    limit: int = Query(50, ge=1, le=200),
    session: SessionContext = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service)
):
    """The caller's message feed, newest first"""
    return service.list_feed(session, limit=limit)


@router.get("/recipients", response_model=List[RecipientResponse])
async def list_recipients(
    classroom_id: Optional[str] = None,
    session: SessionContext = Depends(require_permission("messages:create")),
    service: MessageService = Depends(get_message_service)
):
    """People the caller may message privately"""
    return service.list_recipients(session, classroom_id)


@router.get("/classrooms/{classroom_id}", response_model=List[MessageResponse])
async def list_classroom_messages(
    classroom_id: str,
    session: SessionContext = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_supabase)
):
    """Messages posted in a classroom, oldest first"""
    check_classroom_access(classroom_id, session, supabase)
    return service.list_classroom_thread(classroom_id, session)
