"""
Page routes: the view models behind each screen of the client.

Guarded pages redirect anonymous callers to /auth; the landing and auth
pages send signed-in callers on to their dashboard.
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from app.config.permissions_config import USER_ROLES
from app.core.dependencies import get_optional_session
from app.core.session import SessionContext
from app.database.supabase_client import get_supabase
from app.modules.classrooms.service import ClassroomService
from app.modules.dashboards.service import DashboardService
from app.modules.events.calendar import events_in_month, parse_month
from app.modules.events.service import EventService
from app.modules.messages.service import MessageService
from app.modules.pages.schemas import (
    PageUser, LandingPage, AuthPage, DashboardPage, ClassroomsPage,
    MessagesPage, CalendarPage, NotFoundPage
)
from app.modules.tasks.service import TaskService
from supabase import Client
from typing import Optional, Union

router = APIRouter(tags=["pages"])
not_found_router = APIRouter(tags=["pages"])

AUTH_PATH = "/auth"
DASHBOARD_PATH = "/dashboard"


def _to_auth() -> RedirectResponse:
    return RedirectResponse(url=AUTH_PATH, status_code=303)


def _page_user(session: SessionContext) -> PageUser:
    return PageUser(**session.to_dict())


@router.get("/", response_model=None)
async def landing(session: Optional[SessionContext] = Depends(get_optional_session)) -> Union[LandingPage, RedirectResponse]:
    if session:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    return LandingPage(
        message="Welcome to ParentPing",
        links={"sign_in": AUTH_PATH, "dashboard": DASHBOARD_PATH}
    )


@router.get("/auth", response_model=None)
async def auth_page(session: Optional[SessionContext] = Depends(get_optional_session)) -> Union[AuthPage, RedirectResponse]:
    if session:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    return AuthPage(
        roles=list(USER_ROLES),
        endpoints={
            "sign_in": "/api/v1/auth/login",
            "sign_up": "/api/v1/auth/register",
            "sign_out": "/api/v1/auth/logout"
        }
    )


@router.get("/dashboard", response_model=None)
async def dashboard_page(
    session: Optional[SessionContext] = Depends(get_optional_session),
    supabase: Client = Depends(get_supabase)
) -> Union[DashboardPage, RedirectResponse]:
    if not session:
        return _to_auth()
    return DashboardPage(
        user=_page_user(session),
        dashboard=DashboardService(supabase).get_dashboard(session)
    )


@router.get("/dashboard/classrooms", response_model=None)
async def classrooms_page(
    session: Optional[SessionContext] = Depends(get_optional_session),
    supabase: Client = Depends(get_supabase)
) -> Union[ClassroomsPage, RedirectResponse]:
    if not session:
        return _to_auth()
    return ClassroomsPage(
        user=_page_user(session),
        classrooms=ClassroomService(supabase).list_classrooms(session)
    )


@router.get("/dashboard/messages", response_model=None)
async def messages_page(
    session: Optional[SessionContext] = Depends(get_optional_session),
    supabase: Client = Depends(get_supabase)
) -> Union[MessagesPage, RedirectResponse]:
    if not session:
        return _to_auth()
    return MessagesPage(
        user=_page_user(session),
        messages=MessageService(supabase).list_feed(session),
        classrooms=ClassroomService(supabase).list_classrooms(session)
    )


@router.get("/dashboard/calendar", response_model=None)
async def calendar_page(
    month: Optional[str] = None,
    session: Optional[SessionContext] = Depends(get_optional_session),
    supabase: Client = Depends(get_supabase)
) -> Union[CalendarPage, RedirectResponse]:
    if not session:
        return _to_auth()
    today = date.today()
    try:
        year, month_number = parse_month(month) if month else (today.year, today.month)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    events = EventService(supabase).list_events(session)
    return CalendarPage(
        user=_page_user(session),
        month=f"{year:04d}-{month_number:02d}",
        events=events,
        month_events=events_in_month(events, year, month_number),
        tasks=TaskService(supabase).list_tasks(session.user_id)
    )


@not_found_router.get("/{path:path}", include_in_schema=False)
async def not_found(path: str, request: Request):
    return JSONResponse(status_code=404, content=NotFoundPage(path=request.url.path).model_dump())
