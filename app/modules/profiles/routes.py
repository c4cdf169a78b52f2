from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileSummary
from app.modules.profiles.service import ProfileService
from app.core.dependencies import require_permission, get_user_classroom_ids
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    session: SessionContext = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile"""
    return service.get_profile(session.user_id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(require_permission("profiles:update")),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the caller's name fields"""
    return service.update_profile(session.user_id, profile_data)


@router.get("/{user_id}", response_model=ProfileSummary)
async def get_profile(
    user_id: str,
    session: SessionContext = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service),
    supabase: Client = Depends(get_supabase)
):
    """Public summary of another user (self, teachers, or someone sharing a classroom)"""
    summary = service.get_summary(user_id)
    if user_id == session.user_id or session.is_teacher or summary.role == "teacher":
        return summary
    shared = set(get_user_classroom_ids(session.user_id, supabase)) & set(get_user_classroom_ids(user_id, supabase))
    if not shared:
        raise HTTPException(status_code=403, detail="You do not share a classroom with this user")
    return summary
