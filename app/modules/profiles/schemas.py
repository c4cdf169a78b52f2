from pydantic import BaseModel
from typing import Literal, Optional
from datetime import datetime

UserRole = Literal["teacher", "student", "parent"]


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileSummary(BaseModel):
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
