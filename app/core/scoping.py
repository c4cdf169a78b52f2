"""
Role-scoped fetch policy: which classrooms and students a viewer may read.
"""

from app.core.dependencies import get_user_classroom_ids
from app.core.session import SessionContext
from supabase import Client
from typing import List
import logging

logger = logging.getLogger(__name__)


def get_student_ids_in_classrooms(classroom_ids: List[str], supabase: Client) -> List[str]:
    """Distinct student members across the given classrooms"""
    if not classroom_ids:
        return []
    result = supabase.table("classroom_members")\
        .select("user_id")\
        .in_("classroom_id", classroom_ids)\
        .eq("role", "student")\
        .execute()
    return sorted({m["user_id"] for m in result.data or []})


def resolve_child_ids(parent_id: str, supabase: Client) -> List[str]:
    """Students treated as a parent's children.

    There is no guardian link table: every student sharing a classroom with the
    parent counts. This is a stand-in until guardian relationships are modelled.
    """
    return get_student_ids_in_classrooms(get_user_classroom_ids(parent_id, supabase), supabase)


def get_taught_classroom_ids(teacher_id: str, supabase: Client) -> List[str]:
    """Classrooms a teacher created or is enrolled in"""
    created = supabase.table("classrooms")\
        .select("id")\
        .eq("created_by", teacher_id)\
        .execute()
    ids = {c["id"] for c in created.data or []}
    ids.update(get_user_classroom_ids(teacher_id, supabase))
    return sorted(ids)


def resolve_scoped_classroom_ids(session: SessionContext, supabase: Client) -> List[str]:
    if session.is_teacher:
        return get_taught_classroom_ids(session.user_id, supabase)
    return get_user_classroom_ids(session.user_id, supabase)


def resolve_scoped_student_ids(session: SessionContext, supabase: Client) -> List[str]:
    """Students whose grades, attendance and fees the viewer may read"""
    if session.role == "student":
        return [session.user_id]
    if session.role == "parent":
        return resolve_child_ids(session.user_id, supabase)
    return get_student_ids_in_classrooms(get_taught_classroom_ids(session.user_id, supabase), supabase)
