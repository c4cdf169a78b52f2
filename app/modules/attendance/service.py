import logging
from supabase import Client
from app.core.dependencies import check_classroom_teacher, check_student_in_classroom
from app.core.scoping import resolve_scoped_student_ids
from app.core.session import SessionContext
from app.modules.attendance.schemas import AttendanceCreate, AttendanceResponse
from app.modules.classrooms.service import get_classroom_names
from app.modules.profiles.service import ProfileService, display_name
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record_attendance(self, attendance_data: AttendanceCreate, session: SessionContext) -> AttendanceResponse:
        """Mark a student present/absent/late/excused for a day"""
        check_classroom_teacher(attendance_data.classroom_id, session, self.supabase)
        check_student_in_classroom(attendance_data.classroom_id, attendance_data.student_id, self.supabase)
        try:
            result = self.supabase.table("attendance").insert({
                "classroom_id": attendance_data.classroom_id,
                "student_id": attendance_data.student_id,
                "date": attendance_data.date.isoformat(),
                "status": attendance_data.status,
                "notes": attendance_data.notes,
                "created_by": session.user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error recording attendance: {e}")
            raise HTTPException(status_code=500, detail="Failed to record attendance")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to record attendance")
        return self.enrich(result.data)[0]

    def list_attendance(
        self,
        session: SessionContext,
        classroom_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[AttendanceResponse]:
        """Attendance of the students in the caller's scope, most recent day first"""
        if classroom_id and session.is_teacher:
            check_classroom_teacher(classroom_id, session, self.supabase)
        try:
            student_ids = resolve_scoped_student_ids(session, self.supabase)
            if not student_ids:
                return []
            query = self.supabase.table("attendance")\
                .select("*")\
                .in_("student_id", student_ids)
            if classroom_id:
                query = query.eq("classroom_id", classroom_id)
            query = query.order("date", desc=True)
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return self.enrich(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading attendance: {e}")
            raise HTTPException(status_code=500, detail="Failed to load attendance")

    def enrich(self, rows: List[dict]) -> List[AttendanceResponse]:
        if not rows:
            return []
        classroom_names = get_classroom_names((a["classroom_id"] for a in rows), self.supabase)
        students = ProfileService(self.supabase).get_profiles_by_user_ids(a["student_id"] for a in rows)
        return [
            AttendanceResponse(
                **a,
                classroom_name=classroom_names.get(a["classroom_id"], "Unknown"),
                student_name=display_name(students.get(a["student_id"]))
            )
            for a in rows
        ]
