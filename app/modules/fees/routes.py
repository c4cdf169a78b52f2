from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.fees.schemas import FeeCreate, FeeResponse, FeeStatus
from app.modules.fees.service import FeeService
from app.core.dependencies import require_permission
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/fees", tags=["fees"])


def get_fee_service(supabase: Client = Depends(get_supabase)) -> FeeService:
    return FeeService(supabase)


@router.post("", response_model=FeeResponse, status_code=201)
async def create_fee(
    fee_data: FeeCreate,
    session: SessionContext = Depends(require_permission("fees:create")),
    service: FeeService = Depends(get_fee_service)
):
    """Bill a student (teachers)"""
    return service.create_fee(fee_data, session)


@router.get("", response_model=List[FeeResponse])
async def list_fees(
    status: Optional[FeeStatus] = None,
    session: SessionContext = Depends(require_permission("fees:read")),
    service: FeeService = Depends(get_fee_service)
):
    """Fees in the caller's scope, optionally filtered by status"""
    return service.list_fees(session, status=status)


@router.post("/{fee_id}/pay", response_model=FeeResponse)
async def pay_fee(
    fee_id: str,
    session: SessionContext = Depends(require_permission("fees:pay")),
    service: FeeService = Depends(get_fee_service)
):
    """Mark a fee as paid (parents)"""
    return service.pay_fee(fee_id, session)
