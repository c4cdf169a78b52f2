from pydantic import BaseModel
from typing import List, Literal, Optional, Union
from datetime import datetime
from app.modules.attendance.schemas import AttendanceResponse
from app.modules.fees.schemas import FeeResponse
from app.modules.grades.schemas import GradeResponse


class TeacherStats(BaseModel):
    total_classrooms: int = 0
    total_students: int = 0
    total_parents: int = 0
    unread_messages: int = 0
    upcoming_events: int = 0


class LearnerStats(BaseModel):
    total_classrooms: int = 0
    average_grade: int = 0
    attendance_rate: int = 0
    pending_fees: float = 0
    upcoming_events: int = 0


class RecentMessage(BaseModel):
    id: str
    message: str
    preview: str
    sender_name: str
    created_at: datetime
    classroom_name: Optional[str] = None


class UpcomingEvent(BaseModel):
    id: str
    title: str
    event_date: datetime
    event_type: str
    classroom_name: Optional[str] = None


class TeacherDashboard(BaseModel):
    role: Literal["teacher"] = "teacher"
    stats: TeacherStats
    recent_messages: List[RecentMessage]
    upcoming_events: List[UpcomingEvent]


class LearnerDashboard(BaseModel):
    role: Literal["student", "parent"]
    stats: LearnerStats
    recent_grades: List[GradeResponse]
    recent_attendance: List[AttendanceResponse]
    pending_fees: List[FeeResponse]
    upcoming_events: List[UpcomingEvent]


DashboardResponse = Union[TeacherDashboard, LearnerDashboard]
