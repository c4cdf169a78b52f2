import logging
from collections import Counter
from datetime import datetime, timezone
from supabase import Client
from app.config import settings
from app.core.errors import is_unique_violation
from app.core.session import SessionContext
from app.modules.classrooms.codes import generate_classroom_code, normalize_classroom_code
from app.modules.classrooms.schemas import (
    ClassroomCreate, ClassroomUpdate, ClassroomResponse,
    ClassroomMemberResponse, ClassroomJoinResponse
)
from app.modules.profiles.service import ProfileService
from typing import Dict, Iterable, List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

CLASSROOM_NOT_FOUND = "Classroom not found. Please check the code."
ALREADY_JOINED = "You are already a member of this classroom."


def get_classroom_names(classroom_ids: Iterable[str], supabase: Client) -> Dict[str, str]:
    """Map classroom id -> name for a batch of ids"""
    ids = list({cid for cid in classroom_ids if cid})
    if not ids:
        return {}
    result = supabase.table("classrooms")\
        .select("id, name")\
        .in_("id", ids)\
        .execute()
    return {c["id"]: c["name"] for c in result.data or []}


class ClassroomService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_classroom(self, classroom_data: ClassroomCreate, session: SessionContext) -> ClassroomResponse:
        """Create a classroom with a fresh join code and enrol the creator.

        The classroom row is removed again if the creator's membership cannot be
        written, so callers see both rows or neither.
        """
        classroom_code = generate_classroom_code(settings.classroom_code_length)
        try:
            result = self.supabase.table("classrooms").insert({
                "name": classroom_data.name,
                "subject": classroom_data.subject,
                "classroom_code": classroom_code,
                "created_by": session.user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error creating classroom: {e}")
            raise HTTPException(status_code=500, detail="Failed to create classroom")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create classroom")
        classroom = result.data[0]

        try:
            self.supabase.table("classroom_members").insert({
                "user_id": session.user_id,
                "classroom_id": classroom["id"],
                "role": session.role
            }).execute()
        except Exception as e:
            logger.error(f"Error enrolling creator in classroom {classroom['id']}: {e}")
            self._discard_classroom(classroom["id"])
            raise HTTPException(status_code=500, detail="Failed to create classroom")

        logger.info(f"Classroom {classroom['id']} created with code {classroom_code}")
        return ClassroomResponse(**classroom, member_count=1)

    def join_classroom(self, raw_code: str, session: SessionContext) -> ClassroomJoinResponse:
        """Join by code: not found -> 404, existing membership -> 409, otherwise enrol with the caller's role"""
        code = normalize_classroom_code(raw_code)
        try:
            lookup = self.supabase.table("classrooms")\
                .select("*")\
                .eq("classroom_code", code)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error looking up classroom code: {e}")
            raise HTTPException(status_code=500, detail="Failed to join classroom")
        if not lookup.data:
            raise HTTPException(status_code=404, detail=CLASSROOM_NOT_FOUND)
        classroom = lookup.data[0]

        existing = self.supabase.table("classroom_members")\
            .select("id")\
            .eq("user_id", session.user_id)\
            .eq("classroom_id", classroom["id"])\
            .limit(1)\
            .execute()
        if existing.data:
            raise HTTPException(status_code=409, detail=ALREADY_JOINED)

        try:
            result = self.supabase.table("classroom_members").insert({
                "user_id": session.user_id,
                "classroom_id": classroom["id"],
                "role": session.role
            }).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=ALREADY_JOINED)
            logger.error(f"Error joining classroom {classroom['id']}: {e}")
            raise HTTPException(status_code=500, detail="Failed to join classroom")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to join classroom")

        logger.info(f"User {session.user_id} joined classroom {classroom['id']} as {session.role}")
        counts = self._member_counts([classroom["id"]])
        return ClassroomJoinResponse(
            classroom=ClassroomResponse(**classroom, member_count=counts.get(classroom["id"], 0)),
            membership=ClassroomMemberResponse(**result.data[0]),
            message=f'Successfully joined "{classroom["name"]}"'
        )

    def list_classrooms(self, session: SessionContext) -> List[ClassroomResponse]:
        """Teachers see every classroom; students and parents see their memberships"""
        try:
            query = self.supabase.table("classrooms").select("*")
            if not session.is_teacher:
                memberships = self.supabase.table("classroom_members")\
                    .select("classroom_id")\
                    .eq("user_id", session.user_id)\
                    .execute()
                classroom_ids = [m["classroom_id"] for m in memberships.data or []]
                if not classroom_ids:
                    return []
                query = query.in_("id", classroom_ids)
            result = query.order("created_at", desc=True).execute()
            classrooms = result.data or []
            counts = self._member_counts([c["id"] for c in classrooms])
            return [ClassroomResponse(**c, member_count=counts.get(c["id"], 0)) for c in classrooms]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing classrooms: {e}")
            raise HTTPException(status_code=500, detail="Failed to load classrooms")

    def get_classroom(self, classroom: dict) -> ClassroomResponse:
        counts = self._member_counts([classroom["id"]])
        return ClassroomResponse(**classroom, member_count=counts.get(classroom["id"], 0))

    def update_classroom(self, classroom_id: str, classroom_data: ClassroomUpdate) -> ClassroomResponse:
        """Update the mutable fields (name, subject)"""
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if classroom_data.name is not None:
            if not classroom_data.name.strip():
                raise HTTPException(status_code=422, detail="Classroom name cannot be empty")
            update_data["name"] = classroom_data.name.strip()
        if classroom_data.subject is not None:
            update_data["subject"] = classroom_data.subject.strip() or None
        try:
            result = self.supabase.table("classrooms")\
                .update(update_data)\
                .eq("id", classroom_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating classroom {classroom_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update classroom")
        if not result.data:
            raise HTTPException(status_code=404, detail="Classroom not found")
        return self.get_classroom(result.data[0])

    def list_members(self, classroom_id: str) -> List[ClassroomMemberResponse]:
        """Members of a classroom with their names"""
        try:
            result = self.supabase.table("classroom_members")\
                .select("*")\
                .eq("classroom_id", classroom_id)\
                .order("joined_at")\
                .execute()
            members = result.data or []
            profiles = ProfileService(self.supabase).get_profiles_by_user_ids(m["user_id"] for m in members)
        except Exception as e:
            logger.error(f"Error listing members of {classroom_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load classroom members")
        return [
            ClassroomMemberResponse(
                **m,
                first_name=profiles.get(m["user_id"], {}).get("first_name"),
                last_name=profiles.get(m["user_id"], {}).get("last_name")
            )
            for m in members
        ]

    def _member_counts(self, classroom_ids: List[str]) -> Dict[str, int]:
        if not classroom_ids:
            return {}
        result = self.supabase.table("classroom_members")\
            .select("classroom_id")\
            .in_("classroom_id", classroom_ids)\
            .execute()
        return Counter(m["classroom_id"] for m in result.data or [])

    def _discard_classroom(self, classroom_id: str) -> None:
        try:
            self.supabase.table("classrooms").delete().eq("id", classroom_id).execute()
        except Exception as e:
            logger.error(f"Could not remove orphaned classroom {classroom_id}: {e}")
