import logging
from datetime import date, datetime, timezone
from supabase import Client
from app.config.permissions_config import USER_ROLES
from app.core.dependencies import check_classroom_access
from app.core.session import SessionContext
from app.modules.classrooms.service import get_classroom_names
from app.modules.events.calendar import is_event_visible, events_on_day, events_in_month
from app.modules.events.schemas import EventCreate, EventUpdate, EventResponse
from typing import List, Optional, Tuple
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_event(self, event_data: EventCreate, session: SessionContext) -> EventResponse:
        """Create a calendar event, optionally tied to a classroom"""
        if event_data.classroom_id:
            check_classroom_access(event_data.classroom_id, session, self.supabase)
        try:
            result = self.supabase.table("events").insert({
                "title": event_data.title,
                "description": event_data.description,
                "event_date": event_data.event_date.isoformat(),
                "event_type": event_data.event_type,
                "audience": event_data.audience,
                "classroom_id": event_data.classroom_id,
                "created_by": session.user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error creating event: {e}")
            raise HTTPException(status_code=500, detail="Failed to create event")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create event")
        return self.enrich(result.data)[0]

    def list_events(
        self,
        session: SessionContext,
        month: Optional[Tuple[int, int]] = None,
        day: Optional[date] = None
    ) -> List[EventResponse]:
        """Events visible to the caller ordered by date, optionally narrowed to a month or a day"""
        try:
            result = self.supabase.table("events")\
                .select("*")\
                .order("event_date")\
                .execute()
        except Exception as e:
            logger.error(f"Error loading events: {e}")
            raise HTTPException(status_code=500, detail="Failed to load calendar data")
        rows = [e for e in result.data or [] if is_event_visible(e, session.user_id, session.role)]
        events = self.enrich(rows)
        if month:
            events = events_in_month(events, *month)
        if day:
            events = events_on_day(events, day)
        return events

    def get_event(self, event_id: str, session: SessionContext) -> EventResponse:
        row = self._get_row(event_id)
        if not is_event_visible(row, session.user_id, session.role):
            raise HTTPException(status_code=404, detail="Event not found")
        return self.enrich([row])[0]

    def update_event(self, event_id: str, event_data: EventUpdate, session: SessionContext) -> EventResponse:
        """Update an event (creator only)"""
        self._check_creator(self._get_row(event_id), session)
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        for field, value in event_data.model_dump(exclude_unset=True).items():
            if field == "event_date" and value is not None:
                value = value.isoformat()
            if field == "title":
                if not value or not value.strip():
                    raise HTTPException(status_code=422, detail="Event title is required")
                value = value.strip()
            if field == "audience":
                value = sorted(set(value)) if value else list(USER_ROLES)
            update_data[field] = value
        if update_data.get("classroom_id"):
            check_classroom_access(update_data["classroom_id"], session, self.supabase)
        try:
            result = self.supabase.table("events")\
                .update(update_data)\
                .eq("id", event_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update event")
        if not result.data:
            raise HTTPException(status_code=404, detail="Event not found")
        return self.enrich(result.data)[0]

    def delete_event(self, event_id: str, session: SessionContext) -> bool:
        """Delete an event (creator only)"""
        self._check_creator(self._get_row(event_id), session)
        try:
            result = self.supabase.table("events")\
                .delete()\
                .eq("id", event_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete event")

    def enrich(self, rows: List[dict]) -> List[EventResponse]:
        """Attach classroom names"""
        names = get_classroom_names((e.get("classroom_id") for e in rows), self.supabase)
        return [EventResponse(**e, classroom_name=names.get(e.get("classroom_id"))) for e in rows]

    def _get_row(self, event_id: str) -> dict:
        result = self.supabase.table("events")\
            .select("*")\
            .eq("id", event_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Event not found")
        return result.data[0]

    @staticmethod
    def _check_creator(row: dict, session: SessionContext) -> None:
        if row.get("created_by") != session.user_id:
            raise HTTPException(status_code=403, detail="Only the event creator can change it")
