import logging
from supabase import Client
from app.core.dependencies import check_classroom_teacher, check_student_in_classroom
from app.core.scoping import resolve_scoped_student_ids
from app.core.session import SessionContext
from app.modules.classrooms.service import get_classroom_names
from app.modules.grades.schemas import GradeCreate, GradeResponse
from app.modules.profiles.service import ProfileService, display_name
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def grade_percentage(grade: Optional[float], max_grade: Optional[float]) -> Optional[float]:
    if grade is None or not max_grade:
        return None
    return round(grade / max_grade * 100, 2)


class GradeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_grade(self, grade_data: GradeCreate, session: SessionContext) -> GradeResponse:
        """Record a grade for a student of a classroom the caller teaches"""
        check_classroom_teacher(grade_data.classroom_id, session, self.supabase)
        check_student_in_classroom(grade_data.classroom_id, grade_data.student_id, self.supabase)
        try:
            result = self.supabase.table("grades").insert({
                "classroom_id": grade_data.classroom_id,
                "student_id": grade_data.student_id,
                "assignment_title": grade_data.assignment_title,
                "grade": grade_data.grade,
                "max_grade": grade_data.max_grade,
                "comments": grade_data.comments,
                "date_assigned": grade_data.date_assigned.isoformat() if grade_data.date_assigned else None,
                "date_submitted": grade_data.date_submitted.isoformat() if grade_data.date_submitted else None,
                "created_by": session.user_id
            }).execute()
        except Exception as e:
            logger.error(f"Error creating grade: {e}")
            raise HTTPException(status_code=500, detail="Failed to save grade")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save grade")
        return self.enrich(result.data)[0]

    def list_grades(
        self,
        session: SessionContext,
        classroom_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[GradeResponse]:
        """Grades of the students in the caller's scope, newest first"""
        if classroom_id and session.is_teacher:
            check_classroom_teacher(classroom_id, session, self.supabase)
        try:
            student_ids = resolve_scoped_student_ids(session, self.supabase)
            if not student_ids:
                return []
            query = self.supabase.table("grades")\
                .select("*")\
                .in_("student_id", student_ids)
            if classroom_id:
                query = query.eq("classroom_id", classroom_id)
            query = query.order("created_at", desc=True)
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return self.enrich(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading grades: {e}")
            raise HTTPException(status_code=500, detail="Failed to load grades")

    def enrich(self, rows: List[dict]) -> List[GradeResponse]:
        """Attach classroom and student names plus the percentage score"""
        if not rows:
            return []
        classroom_names = get_classroom_names((g["classroom_id"] for g in rows), self.supabase)
        students = ProfileService(self.supabase).get_profiles_by_user_ids(g["student_id"] for g in rows)
        return [
            GradeResponse(
                **g,
                classroom_name=classroom_names.get(g["classroom_id"], "Unknown"),
                student_name=display_name(students.get(g["student_id"])),
                percentage=grade_percentage(g.get("grade"), g.get("max_grade"))
            )
            for g in rows
        ]
