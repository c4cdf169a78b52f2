import logging
from datetime import date, datetime, timezone
from supabase import Client
from app.core.scoping import resolve_scoped_student_ids
from app.core.session import SessionContext
from app.modules.fees.schemas import FeeCreate, FeeResponse
from app.modules.profiles.service import ProfileService, display_name
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class FeeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_fee(self, fee_data: FeeCreate, session: SessionContext) -> FeeResponse:
        """Bill a student enrolled in one of the caller's classrooms"""
        if fee_data.student_id not in resolve_scoped_student_ids(session, self.supabase):
            raise HTTPException(status_code=400, detail="Student is not enrolled in any of your classrooms")
        try:
            result = self.supabase.table("fees").insert({
                "student_id": fee_data.student_id,
                "fee_type": fee_data.fee_type,
                "amount": fee_data.amount,
                "due_date": fee_data.due_date.isoformat(),
                "description": fee_data.description,
                "status": "unpaid"
            }).execute()
        except Exception as e:
            logger.error(f"Error creating fee: {e}")
            raise HTTPException(status_code=500, detail="Failed to create fee")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create fee")
        return self.enrich(result.data)[0]

    def list_fees(self, session: SessionContext, status: Optional[str] = None) -> List[FeeResponse]:
        """Fees of the students in the caller's scope ordered by due date"""
        try:
            student_ids = resolve_scoped_student_ids(session, self.supabase)
            if not student_ids:
                return []
            query = self.supabase.table("fees")\
                .select("*")\
                .in_("student_id", student_ids)
            if status:
                query = query.eq("status", status)
            result = query.order("due_date").execute()
            return self.enrich(result.data or [])
        except Exception as e:
            logger.error(f"Error loading fees: {e}")
            raise HTTPException(status_code=500, detail="Failed to load fees")

    def pay_fee(self, fee_id: str, session: SessionContext) -> FeeResponse:
        """Mark an unpaid fee as paid today"""
        result = self.supabase.table("fees")\
            .select("*")\
            .eq("id", fee_id)\
            .limit(1)\
            .execute()
        if not result.data or result.data[0]["student_id"] not in resolve_scoped_student_ids(session, self.supabase):
            raise HTTPException(status_code=404, detail="Fee not found")
        if result.data[0]["status"] == "paid":
            raise HTTPException(status_code=409, detail="Fee is already paid")
        try:
            updated = self.supabase.table("fees")\
                .update({
                    "status": "paid",
                    "paid_date": date.today().isoformat(),
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", fee_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error paying fee {fee_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update fee")
        if not updated.data:
            raise HTTPException(status_code=404, detail="Fee not found")
        logger.info(f"Fee {fee_id} marked paid by {session.user_id}")
        return self.enrich(updated.data)[0]

    def enrich(self, rows: List[dict]) -> List[FeeResponse]:
        if not rows:
            return []
        students = ProfileService(self.supabase).get_profiles_by_user_ids(f["student_id"] for f in rows)
        return [FeeResponse(**f, student_name=display_name(students.get(f["student_id"]))) for f in rows]
