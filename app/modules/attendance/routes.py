from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.attendance.schemas import AttendanceCreate, AttendanceResponse
from app.modules.attendance.service import AttendanceService
from app.core.dependencies import require_permission
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/attendance", tags=["attendance"])


def get_attendance_service(supabase: Client = Depends(get_supabase)) -> AttendanceService:
    return AttendanceService(supabase)


@router.post("", response_model=AttendanceResponse, status_code=201)
async def record_attendance(
    attendance_data: AttendanceCreate,
    session: SessionContext = Depends(require_permission("attendance:create")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Record attendance (teacher of the classroom)"""
    return service.record_attendance(attendance_data, session)


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    classroom_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: SessionContext = Depends(require_permission("attendance:read")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Attendance records in the caller's scope"""
    return service.list_attendance(session, classroom_id=classroom_id, limit=limit)
