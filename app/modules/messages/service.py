import logging
from supabase import Client
from app.core.dependencies import check_classroom_access, get_user_classroom_ids
from app.core.session import SessionContext
from app.modules.classrooms.service import get_classroom_names
from app.modules.messages.schemas import MessageCreate, MessageResponse, RecipientResponse
from app.modules.profiles.service import ProfileService
from typing import Dict, Iterable, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def is_message_visible(record: dict, user_id: str, classroom_ids: Iterable[str]) -> bool:
    """Sender and receiver always see a message; announcements are visible to the classroom"""
    if record.get("sender_id") == user_id or record.get("receiver_id") == user_id:
        return True
    return record.get("message_type") == "announcement" and record.get("classroom_id") in set(classroom_ids)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def send_message(self, message_data: MessageCreate, session: SessionContext) -> MessageResponse:
        """Post an announcement to a classroom or a private message to one user"""
        if message_data.classroom_id:
            check_classroom_access(message_data.classroom_id, session, self.supabase)
        if message_data.message_type == "private":
            if message_data.receiver_id == session.user_id:
                raise HTTPException(status_code=400, detail="You cannot message yourself")
            if not self.profiles.get_profile_row(message_data.receiver_id):
                raise HTTPException(status_code=404, detail="Recipient not found")

        try:
            result = self.supabase.table("messages").insert({
                "sender_id": session.user_id,
                "receiver_id": message_data.receiver_id,
                "classroom_id": message_data.classroom_id,
                "message": message_data.message,
                "message_type": message_data.message_type,
                "attachment_url": message_data.attachment_url,
                "attachment_name": message_data.attachment_name
            }).execute()
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            raise HTTPException(status_code=500, detail="Failed to send message")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to send message")
        return self.enrich(result.data)[0]

    def visible_classroom_ids(self, session: SessionContext) -> List[str]:
        if session.is_teacher:
            result = self.supabase.table("classrooms").select("id").execute()
            return [c["id"] for c in result.data or []]
        return get_user_classroom_ids(session.user_id, self.supabase)

    def list_feed(self, session: SessionContext, limit: int = 50) -> List[MessageResponse]:
        """Messages sent or received by the caller plus announcements in their classrooms, newest first"""
        try:
            rows: Dict[str, dict] = {}
            for column in ("sender_id", "receiver_id"):
                result = self.supabase.table("messages")\
                    .select("*")\
                    .eq(column, session.user_id)\
                    .order("created_at", desc=True)\
                    .limit(limit)\
                    .execute()
                rows.update({m["id"]: m for m in result.data or []})
            classroom_ids = self.visible_classroom_ids(session)
            if classroom_ids:
                result = self.supabase.table("messages")\
                    .select("*")\
                    .eq("message_type", "announcement")\
                    .in_("classroom_id", classroom_ids)\
                    .order("created_at", desc=True)\
                    .limit(limit)\
                    .execute()
                rows.update({m["id"]: m for m in result.data or []})
            ordered = sorted(rows.values(), key=lambda m: m["created_at"], reverse=True)[:limit]
            return self.enrich(ordered)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading messages for {session.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load messages")

    def list_classroom_thread(self, classroom_id: str, session: SessionContext) -> List[MessageResponse]:
        """Messages posted in one classroom, oldest first; private ones only to their two parties"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("classroom_id", classroom_id)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error loading classroom {classroom_id} messages: {e}")
            raise HTTPException(status_code=500, detail="Failed to load messages")
        rows = [m for m in result.data or [] if is_message_visible(m, session.user_id, [classroom_id])]
        return self.enrich(rows)

    def list_recipients(self, session: SessionContext, classroom_id: Optional[str] = None) -> List[RecipientResponse]:
        """Who the caller may message privately.

        Teachers pick from the members of a classroom; students and parents
        pick from the teachers of the classrooms they belong to.
        """
        if session.is_teacher:
            if not classroom_id:
                return []
            check_classroom_access(classroom_id, session, self.supabase)
            members = self.supabase.table("classroom_members")\
                .select("user_id")\
                .eq("classroom_id", classroom_id)\
                .neq("user_id", session.user_id)\
                .execute()
            user_ids = [m["user_id"] for m in members.data or []]
            profiles = self.profiles.get_profiles_by_user_ids(user_ids)
        else:
            classroom_ids = [classroom_id] if classroom_id else get_user_classroom_ids(session.user_id, self.supabase)
            if classroom_id:
                check_classroom_access(classroom_id, session, self.supabase)
            if not classroom_ids:
                return []
            members = self.supabase.table("classroom_members")\
                .select("user_id")\
                .in_("classroom_id", classroom_ids)\
                .neq("user_id", session.user_id)\
                .execute()
            user_ids = [m["user_id"] for m in members.data or []]
            profiles = {
                uid: p for uid, p in self.profiles.get_profiles_by_user_ids(user_ids).items()
                if p.get("role") == "teacher"
            }
        recipients = [RecipientResponse(**p) for p in profiles.values()]
        return sorted(recipients, key=lambda r: ((r.first_name or "").lower(), (r.last_name or "").lower()))

    def enrich(self, rows: List[dict]) -> List[MessageResponse]:
        """Attach sender/receiver names and classroom names to raw message rows"""
        if not rows:
            return []
        profiles = self.profiles.get_profiles_by_user_ids(
            [m["sender_id"] for m in rows] + [m.get("receiver_id") for m in rows]
        )
        classroom_names = get_classroom_names((m.get("classroom_id") for m in rows), self.supabase)
        return [
            MessageResponse(
                **m,
                sender=profiles.get(m["sender_id"]),
                receiver=profiles.get(m.get("receiver_id")) if m.get("receiver_id") else None,
                classroom_name=classroom_names.get(m.get("classroom_id"))
            )
            for m in rows
        ]
