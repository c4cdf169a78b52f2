from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.events.calendar import parse_month
from app.modules.events.schemas import EventCreate, EventUpdate, EventResponse
from app.modules.events.service import EventService
from app.core.dependencies import require_permission
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(supabase: Client = Depends(get_supabase)) -> EventService:
    return EventService(supabase)


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    session: SessionContext = Depends(require_permission("events:create")),
    service: EventService = Depends(get_event_service)
):
    """Create an event (teachers)"""
    return service.create_event(event_data, session)


@router.get("", response_model=List[EventResponse])
async def list_events(
    month: Optional[str] = None,
    day: Optional[date] = None,
    session: SessionContext = Depends(require_permission("events:read")),
    service: EventService = Depends(get_event_service)
):
    """Events visible to the caller; month=YYYY-MM and day=YYYY-MM-DD narrow the list"""
    try:
        month_filter = parse_month(month) if month else None
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return service.list_events(session, month=month_filter, day=day)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    session: SessionContext = Depends(require_permission("events:read")),
    service: EventService = Depends(get_event_service)
):
    """Get a visible event by ID"""
    return service.get_event(event_id, session)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    session: SessionContext = Depends(require_permission("events:update")),
    service: EventService = Depends(get_event_service)
):
    """Update an event (creator only)"""
    return service.update_event(event_id, event_data, session)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    session: SessionContext = Depends(require_permission("events:delete")),
    service: EventService = Depends(get_event_service)
):
    """Delete an event (creator only)"""
    service.delete_event(event_id, session)
    return None
