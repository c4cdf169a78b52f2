from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.grades.schemas import GradeCreate, GradeResponse
from app.modules.grades.service import GradeService
from app.core.dependencies import require_permission
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/grades", tags=["grades"])


def get_grade_service(supabase: Client = Depends(get_supabase)) -> GradeService:
    return GradeService(supabase)


@router.post("", response_model=GradeResponse, status_code=201)
async def create_grade(
    grade_data: GradeCreate,
    session: SessionContext = Depends(require_permission("grades:create")),
    service: GradeService = Depends(get_grade_service)
):
    """Grade a student's assignment (teacher of the classroom)"""
    return service.create_grade(grade_data, session)


@router.get("", response_model=List[GradeResponse])
async def list_grades(
    classroom_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: SessionContext = Depends(require_permission("grades:read")),
    service: GradeService = Depends(get_grade_service)
):
    """Own grades (students), children's grades (parents) or taught students' grades (teachers)"""
    return service.list_grades(session, classroom_id=classroom_id, limit=limit)
