from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date, datetime


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter a task title")
        return v.strip()


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    completed: Optional[bool] = None

    @field_validator("title", "completed")
    @classmethod
    def not_null(cls, v):
        # Only runs for fields the client sent; omit a field to leave it unchanged
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TaskResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    completed: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
