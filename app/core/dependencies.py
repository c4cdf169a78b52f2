"""
Core dependencies for route protection, session resolution and classroom scoping
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.core.session import SessionContext
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_session(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionContext:
    """Resolve the caller's session context from the bearer token"""
    return auth_service.resolve_session(token)


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security)
) -> Optional[str]:
    """Token from the bearer header, falling back to the session cookie"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


def get_optional_session(
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[SessionContext]:
    """Session from bearer header or cookie; None when the caller is anonymous or the token is stale"""
    if not token:
        return None
    try:
        return auth_service.resolve_session(token)
    except HTTPException:
        return None


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(session: SessionContext = Depends(get_session)) -> SessionContext:
        if not session.has_permission(required_permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return session
    return check_permission


def get_user_classroom_ids(user_id: str, supabase: Client) -> List[str]:
    """Return classroom_ids from classroom_members for the user"""
    try:
        result = supabase.table("classroom_members")\
            .select("classroom_id")\
            .eq("user_id", user_id)\
            .execute()
        return [m["classroom_id"] for m in result.data] if result.data else []
    except Exception as e:
        logger.error(f"Error getting classroom ids for {user_id}: {e}")
        return []


def get_classroom_or_404(classroom_id: str, supabase: Client) -> Dict[str, Any]:
    result = supabase.table("classrooms")\
        .select("*")\
        .eq("id", classroom_id)\
        .limit(1)\
        .execute()
    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Classroom not found"
        )
    return result.data[0]


def get_membership(classroom_id: str, user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    result = supabase.table("classroom_members")\
        .select("*")\
        .eq("classroom_id", classroom_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    return result.data[0] if result.data else None


def check_classroom_access(classroom_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    """Teachers may open any classroom; everyone else must be a member. Returns the classroom row."""
    classroom = get_classroom_or_404(classroom_id, supabase)
    if session.is_teacher:
        return classroom
    if get_membership(classroom_id, session.user_id, supabase):
        return classroom
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be a member of this classroom"
    )


def check_classroom_owner(classroom_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    """Only the creating teacher may change a classroom"""
    classroom = get_classroom_or_404(classroom_id, supabase)
    if classroom.get("created_by") != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the classroom creator can perform this action"
        )
    return classroom


def check_classroom_teacher(classroom_id: str, session: SessionContext, supabase: Client) -> Dict[str, Any]:
    """Creator or a teacher member of the classroom; used for grading and attendance"""
    classroom = get_classroom_or_404(classroom_id, supabase)
    if not session.is_teacher:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers can perform this action"
        )
    if classroom.get("created_by") == session.user_id:
        return classroom
    membership = get_membership(classroom_id, session.user_id, supabase)
    if membership and membership.get("role") == "teacher":
        return classroom
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must teach this classroom to perform this action"
    )


def check_student_in_classroom(classroom_id: str, student_id: str, supabase: Client) -> None:
    membership = get_membership(classroom_id, student_id, supabase)
    if not membership or membership.get("role") != "student":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student is not a member of this classroom"
        )
