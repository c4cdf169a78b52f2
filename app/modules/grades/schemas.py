from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime


class GradeCreate(BaseModel):
    classroom_id: str
    student_id: str
    assignment_title: str
    grade: Optional[float] = Field(default=None, ge=0)
    max_grade: float = Field(default=100, gt=0)
    comments: Optional[str] = None
    date_assigned: Optional[date] = None
    date_submitted: Optional[date] = None

    @field_validator("assignment_title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Assignment title is required")
        return v.strip()


class GradeResponse(BaseModel):
    id: str
    classroom_id: str
    student_id: str
    assignment_title: str
    grade: Optional[float] = None
    max_grade: float
    comments: Optional[str] = None
    date_assigned: Optional[date] = None
    date_submitted: Optional[date] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    classroom_name: Optional[str] = None
    student_name: Optional[str] = None
    percentage: Optional[float] = None

    class Config:
        from_attributes = True
