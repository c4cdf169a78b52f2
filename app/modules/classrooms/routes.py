from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.classrooms.schemas import (
    ClassroomCreate, ClassroomUpdate, ClassroomJoin, ClassroomResponse,
    ClassroomMemberResponse, ClassroomJoinResponse
)
from app.modules.classrooms.service import ClassroomService
from app.core.dependencies import require_permission, check_classroom_access, check_classroom_owner
from app.core.session import SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/classrooms", tags=["classrooms"])


def get_classroom_service(supabase: Client = Depends(get_supabase)) -> ClassroomService:
    return ClassroomService(supabase)


@router.post("", response_model=ClassroomResponse, status_code=201)
async def create_classroom(
    classroom_data: ClassroomCreate,
    session: SessionContext = Depends(require_permission("classrooms:create")),
    service: ClassroomService = Depends(get_classroom_service)
):
    """Create a classroom; the response carries its join code"""
    return service.create_classroom(classroom_data, session)


@router.post("/join", response_model=ClassroomJoinResponse, status_code=201)
async def join_classroom(
    join_data: ClassroomJoin,
    session: SessionContext = Depends(require_permission("classrooms:join")),
    service: ClassroomService = Depends(get_classroom_service)
):
    """Join a classroom using the code provided by the teacher"""
    return service.join_classroom(join_data.classroom_code, session)


@router.get("", response_model=List[ClassroomResponse])
async def list_classrooms(
    session: SessionContext = Depends(require_permission("classrooms:read")),
    service: ClassroomService = Depends(get_classroom_service)
):
    """List classrooms visible to the caller, with member counts"""
    return service.list_classrooms(session)


@router.get("/{classroom_id}", response_model=ClassroomResponse)
async def get_classroom(
    classroom_id: str,
    session: SessionContext = Depends(require_permission("classrooms:read")),
    service: ClassroomService = Depends(get_classroom_service),
    supabase: Client = Depends(get_supabase)
):
    """Get classroom by ID (teachers, or members)"""
    classroom = check_classroom_access(classroom_id, session, supabase)
    return service.get_classroom(classroom)


@router.put("/{classroom_id}", response_model=ClassroomResponse)
async def update_classroom(
    classroom_id: str,
    classroom_data: ClassroomUpdate,
    session: SessionContext = Depends(require_permission("classrooms:update")),
    service: ClassroomService = Depends(get_classroom_service),
    supabase: Client = Depends(get_supabase)
):
    """Rename a classroom or change its subject (creator only)"""
    check_classroom_owner(classroom_id, session, supabase)
    return service.update_classroom(classroom_id, classroom_data)


@router.get("/{classroom_id}/members", response_model=List[ClassroomMemberResponse])
async def list_members(
    classroom_id: str,
    session: SessionContext = Depends(require_permission("classrooms:read")),
    service: ClassroomService = Depends(get_classroom_service),
    supabase: Client = Depends(get_supabase)
):
    """List members of a classroom (teachers, or members)"""
    check_classroom_access(classroom_id, session, supabase)
    return service.list_members(classroom_id)
