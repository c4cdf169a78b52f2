from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dashboards.schemas import DashboardResponse
from app.modules.dashboards.service import DashboardService
from app.core.dependencies import get_session
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/dashboards", tags=["dashboards"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/me", response_model=DashboardResponse)
async def get_my_dashboard(
    session: SessionContext = Depends(get_session),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Dashboard cards for the caller's role"""
    return service.get_dashboard(session)
