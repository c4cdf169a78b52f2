import logging
from datetime import datetime, timezone
from supabase import Client
from app.config import settings
from app.core.dependencies import get_user_classroom_ids
from app.core.scoping import resolve_child_ids
from app.core.session import SessionContext
from app.modules.attendance.service import AttendanceService
from app.modules.classrooms.service import get_classroom_names
from app.modules.dashboards.metrics import (
    PENDING_FEE_STATUSES, average_grade_percent, attendance_rate, pending_fee_total, preview
)
from app.modules.dashboards.schemas import (
    TeacherStats, LearnerStats, RecentMessage, UpcomingEvent,
    TeacherDashboard, LearnerDashboard
)
from app.modules.events.calendar import is_event_visible
from app.modules.fees.service import FeeService
from app.modules.grades.service import GradeService
from app.modules.profiles.service import ProfileService, display_name
from typing import List, Union
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def _count(result) -> int:
    return result.count if result.count is not None else len(result.data or [])


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.recent_limit = settings.dashboard_recent_limit

    def get_dashboard(self, session: SessionContext) -> Union[TeacherDashboard, LearnerDashboard]:
        """Role dispatch"""
        try:
            if session.is_teacher:
                return self.teacher_dashboard(session)
            if session.role == "parent":
                return self.parent_dashboard(session)
            return self.student_dashboard(session)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading {session.role} dashboard for {session.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load dashboard data")

    def teacher_dashboard(self, session: SessionContext) -> TeacherDashboard:
        now = datetime.now(timezone.utc).isoformat()
        classrooms = self.supabase.table("classrooms")\
            .select("id")\
            .eq("created_by", session.user_id)\
            .execute()
        classroom_ids = [c["id"] for c in classrooms.data or []]

        students, parents = set(), set()
        if classroom_ids:
            members = self.supabase.table("classroom_members")\
                .select("user_id, role")\
                .in_("classroom_id", classroom_ids)\
                .execute()
            for m in members.data or []:
                if m["role"] == "student":
                    students.add(m["user_id"])
                elif m["role"] == "parent":
                    parents.add(m["user_id"])

        unread = self.supabase.table("messages")\
            .select("id", count="exact")\
            .eq("receiver_id", session.user_id)\
            .eq("message_type", "private")\
            .execute()
        upcoming = self.supabase.table("events")\
            .select("*", count="exact")\
            .eq("created_by", session.user_id)\
            .gte("event_date", now)\
            .order("event_date")\
            .execute()

        return TeacherDashboard(
            stats=TeacherStats(
                total_classrooms=len(classroom_ids),
                total_students=len(students),
                total_parents=len(parents),
                unread_messages=_count(unread),
                upcoming_events=_count(upcoming)
            ),
            recent_messages=self.recent_messages(session.user_id),
            upcoming_events=self._upcoming(upcoming.data or [])
        )

    def recent_messages(self, user_id: str) -> List[RecentMessage]:
        """Latest private messages received"""
        result = self.supabase.table("messages")\
            .select("*")\
            .eq("receiver_id", user_id)\
            .eq("message_type", "private")\
            .order("created_at", desc=True)\
            .limit(self.recent_limit)\
            .execute()
        rows = result.data or []
        senders = ProfileService(self.supabase).get_profiles_by_user_ids(m["sender_id"] for m in rows)
        classroom_names = get_classroom_names((m.get("classroom_id") for m in rows), self.supabase)
        return [
            RecentMessage(
                id=m["id"],
                message=m["message"],
                preview=preview(m["message"]),
                sender_name=display_name(senders.get(m["sender_id"])) or "Anonymous",
                created_at=m["created_at"],
                classroom_name=classroom_names.get(m.get("classroom_id"))
            )
            for m in rows
        ]

    def student_dashboard(self, session: SessionContext) -> LearnerDashboard:
        classroom_ids = get_user_classroom_ids(session.user_id, self.supabase)
        return self._learner_dashboard(session, "student", classroom_ids, [session.user_id])

    def parent_dashboard(self, session: SessionContext) -> LearnerDashboard:
        classroom_ids = get_user_classroom_ids(session.user_id, self.supabase)
        return self._learner_dashboard(session, "parent", classroom_ids, resolve_child_ids(session.user_id, self.supabase))

    def _learner_dashboard(
        self,
        session: SessionContext,
        role: str,
        classroom_ids: List[str],
        student_ids: List[str]
    ) -> LearnerDashboard:
        grades, attendance, fees = [], [], []
        if student_ids:
            grades = self.supabase.table("grades")\
                .select("*")\
                .in_("student_id", student_ids)\
                .order("created_at", desc=True)\
                .execute().data or []
            attendance = self.supabase.table("attendance")\
                .select("*")\
                .in_("student_id", student_ids)\
                .order("date", desc=True)\
                .execute().data or []
            fees = self.supabase.table("fees")\
                .select("*")\
                .in_("student_id", student_ids)\
                .in_("status", list(PENDING_FEE_STATUSES))\
                .order("due_date")\
                .execute().data or []

        events = []
        if classroom_ids:
            result = self.supabase.table("events")\
                .select("*")\
                .in_("classroom_id", classroom_ids)\
                .gte("event_date", datetime.now(timezone.utc).isoformat())\
                .order("event_date")\
                .execute()
            events = [e for e in result.data or [] if is_event_visible(e, session.user_id, session.role)]

        return LearnerDashboard(
            role=role,
            stats=LearnerStats(
                total_classrooms=len(classroom_ids),
                average_grade=average_grade_percent(grades),
                attendance_rate=attendance_rate(attendance),
                pending_fees=pending_fee_total(fees),
                upcoming_events=len(events)
            ),
            recent_grades=GradeService(self.supabase).enrich(grades[:self.recent_limit]),
            recent_attendance=AttendanceService(self.supabase).enrich(attendance[:self.recent_limit]),
            pending_fees=FeeService(self.supabase).enrich(fees),
            upcoming_events=self._upcoming(events)
        )

    def _upcoming(self, events: List[dict]) -> List[UpcomingEvent]:
        events = events[:self.recent_limit]
        names = get_classroom_names((e.get("classroom_id") for e in events), self.supabase)
        return [
            UpcomingEvent(
                id=e["id"],
                title=e["title"],
                event_date=e["event_date"],
                event_type=e["event_type"],
                classroom_name=names.get(e.get("classroom_id"))
            )
            for e in events
        ]
