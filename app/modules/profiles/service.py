import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileSummary
from typing import Dict, Iterable, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def display_name(profile: Optional[dict]) -> str:
    """'First Last' for a profile row; empty string when unknown."""
    if not profile:
        return ""
    return f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile_row(self, user_id: str) -> Optional[dict]:
        """Raw profile row for an auth user id, or None"""
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by auth user id"""
        try:
            row = self.get_profile_row(user_id)
        except Exception as e:
            logger.error(f"Error loading profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")
        if not row:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**row)

    def create_profile(
        self,
        user_id: str,
        email: str,
        role: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> ProfileResponse:
        """Create the profile row for a freshly registered user (no-op if a trigger already did)"""
        existing = self.get_profile_row(user_id)
        if existing:
            return ProfileResponse(**existing)
        result = self.supabase.table("profiles").insert({
            "user_id": user_id,
            "email": email,
            "role": role,
            "first_name": first_name,
            "last_name": last_name
        }).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create profile")
        return ProfileResponse(**result.data[0])

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update name fields on the caller's profile"""
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if profile_data.first_name is not None:
            update_data["first_name"] = profile_data.first_name.strip()
        if profile_data.last_name is not None:
            update_data["last_name"] = profile_data.last_name.strip()
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def get_profiles_by_user_ids(self, user_ids: Iterable[str]) -> Dict[str, dict]:
        """Map user_id -> profile row for a batch of users. Used to enrich messages and records."""
        ids = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("user_id, first_name, last_name, role")\
            .in_("user_id", ids)\
            .execute()
        return {p["user_id"]: p for p in (result.data or [])}

    def get_summary(self, user_id: str) -> ProfileSummary:
        row = self.get_profile_row(user_id)
        if not row:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileSummary(**row)
