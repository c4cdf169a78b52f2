from pydantic import BaseModel
from typing import Literal, Optional
from datetime import date, datetime

AttendanceStatus = Literal["present", "absent", "late", "excused"]


class AttendanceCreate(BaseModel):
    classroom_id: str
    student_id: str
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceResponse(BaseModel):
    id: str
    classroom_id: str
    student_id: str
    date: date
    status: str
    notes: Optional[str] = None
    created_by: str
    created_at: datetime
    classroom_name: Optional[str] = None
    student_name: Optional[str] = None

    class Config:
        from_attributes = True
