from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.modules.profiles.schemas import UserRole


class ClassroomCreate(BaseModel):
    name: str
    subject: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Classroom name is required")
        return v.strip()

    @field_validator("subject")
    @classmethod
    def blank_subject_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class ClassroomUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None


class ClassroomJoin(BaseModel):
    classroom_code: str

    @field_validator("classroom_code")
    @classmethod
    def code_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Classroom code is required")
        return v


class ClassroomResponse(BaseModel):
    id: str
    name: str
    subject: Optional[str] = None
    classroom_code: str
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    member_count: Optional[int] = None

    class Config:
        from_attributes = True


class ClassroomMemberResponse(BaseModel):
    id: str
    classroom_id: str
    user_id: str
    role: UserRole
    joined_at: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True


class ClassroomJoinResponse(BaseModel):
    classroom: ClassroomResponse
    membership: ClassroomMemberResponse
    message: str
