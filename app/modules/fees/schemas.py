from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import date, datetime

FeeStatus = Literal["unpaid", "overdue", "paid"]


class FeeCreate(BaseModel):
    student_id: str
    fee_type: str
    amount: float = Field(gt=0)
    due_date: date
    description: Optional[str] = None

    @field_validator("fee_type")
    @classmethod
    def fee_type_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Fee type is required")
        return v.strip()


class FeeResponse(BaseModel):
    id: str
    student_id: str
    fee_type: str
    amount: float
    due_date: date
    status: FeeStatus
    paid_date: Optional[date] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    student_name: Optional[str] = None

    class Config:
        from_attributes = True
