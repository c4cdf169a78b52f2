from pydantic import BaseModel, EmailStr, Field
from typing import Any, Dict, Optional
from app.modules.profiles.schemas import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role: UserRole


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    role: UserRole
    message: str


class SessionResponse(BaseModel):
    id: str
    email: str
    role: UserRole
    display_name: str
    profile: Dict[str, Any]
    permissions: list
