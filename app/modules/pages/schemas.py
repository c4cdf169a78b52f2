from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from app.modules.classrooms.schemas import ClassroomResponse
from app.modules.dashboards.schemas import DashboardResponse
from app.modules.events.schemas import EventResponse
from app.modules.messages.schemas import MessageResponse
from app.modules.tasks.schemas import TaskResponse


class PageUser(BaseModel):
    id: str
    email: Optional[str] = None
    role: str
    display_name: str
    profile: Optional[Dict[str, Any]] = None


class LandingPage(BaseModel):
    page: str = "landing"
    message: str
    links: Dict[str, str]


class AuthPage(BaseModel):
    page: str = "auth"
    modes: List[str] = ["sign_in", "sign_up"]
    roles: List[str]
    endpoints: Dict[str, str]


class DashboardPage(BaseModel):
    page: str = "dashboard"
    user: PageUser
    dashboard: DashboardResponse


class ClassroomsPage(BaseModel):
    page: str = "classrooms"
    user: PageUser
    classrooms: List[ClassroomResponse]


class MessagesPage(BaseModel):
    page: str = "messages"
    user: PageUser
    messages: List[MessageResponse]
    classrooms: List[ClassroomResponse]


class CalendarPage(BaseModel):
    page: str = "calendar"
    user: PageUser
    month: str
    events: List[EventResponse]
    month_events: List[EventResponse]
    tasks: List[TaskResponse]


class NotFoundPage(BaseModel):
    page: str = "not_found"
    path: str
    detail: str = "Page not found"
