from pydantic import BaseModel, field_validator, model_validator
from typing import Literal, Optional
from datetime import datetime
from app.modules.profiles.schemas import UserRole

MessageType = Literal["announcement", "private"]


class MessageCreate(BaseModel):
    message: str
    message_type: MessageType = "announcement"
    classroom_id: Optional[str] = None
    receiver_id: Optional[str] = None
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def check_target(self):
        if self.message_type == "announcement":
            if not self.classroom_id:
                raise ValueError("Announcements need a classroom_id")
            self.receiver_id = None
        elif not self.receiver_id:
            raise ValueError("Private messages need a receiver_id")
        return self


class MessageParty(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: Optional[str] = None
    classroom_id: Optional[str] = None
    message: str
    message_type: MessageType
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    created_at: datetime
    sender: Optional[MessageParty] = None
    receiver: Optional[MessageParty] = None
    classroom_name: Optional[str] = None

    class Config:
        from_attributes = True


class RecipientResponse(BaseModel):
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
