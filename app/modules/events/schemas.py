from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime
from app.config.permissions_config import USER_ROLES
from app.modules.profiles.schemas import UserRole

EventType = Literal["assignment", "exam", "meeting", "holiday", "announcement", "other"]


class EventCreate(BaseModel):
    title: str
    description: Optional[str] = None
    event_date: datetime
    event_type: EventType
    audience: List[UserRole] = Field(default=[], validate_default=True)
    classroom_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Event title is required")
        return v.strip()

    @field_validator("audience")
    @classmethod
    def default_audience(cls, v: List[str]) -> List[str]:
        # An empty selection means everyone
        return sorted(set(v)) if v else list(USER_ROLES)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    event_type: Optional[EventType] = None
    audience: Optional[List[UserRole]] = None
    classroom_id: Optional[str] = None

    @field_validator("title", "event_date", "event_type")
    @classmethod
    def not_null(cls, v):
        # Only runs for fields the client sent; omit a field to leave it unchanged
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    event_date: datetime
    event_type: str
    audience: List[str]
    classroom_id: Optional[str] = None
    classroom_name: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
