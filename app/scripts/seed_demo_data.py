"""
Seed Demo Data Script
Populates classrooms, grades, attendance and fees for an existing teacher and
student so the dashboards have something to show.

Usage: python -m app.scripts.seed_demo_data <teacher_user_id> <student_user_id>
"""

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings
from app.config.permissions_config import role_has_permission
from app.database.supabase_client import SupabaseClient
from app.modules.classrooms.codes import generate_classroom_code
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_CLASSROOMS = [
    {"name": "Web Development", "subject": "Computer Science"},
    {"name": "Data Structures & Algorithms", "subject": "Computer Science"},
    {"name": "NoSQL Databases", "subject": "Computer Science"},
    {"name": "Backend Development", "subject": "Computer Science"},
    {"name": "Machine Learning", "subject": "Computer Science"},
]

# (classroom name, assignment, grade, days ago)
DEMO_GRADES = [
    ("Web Development", "React Component Architecture", 94, 1),
    ("Data Structures & Algorithms", "Binary Tree Implementation", 87, 2),
    ("NoSQL Databases", "MongoDB Query Optimization", 91, 3),
    ("Backend Development", "REST API Design Project", 88, 4),
]

# (classroom name, status, days ago)
DEMO_ATTENDANCE = [
    ("Web Development", "present", 1),
    ("Data Structures & Algorithms", "present", 2),
    ("NoSQL Databases", "late", 3),
    ("Machine Learning", "present", 4),
]

# (fee type, amount, due in days, description)
DEMO_FEES = [
    ("Cloud Platform Access", 150, 7, "AWS/Azure lab environment access"),
    ("Software License", 100, 14, "JetBrains IDE license for development"),
]


def get_role(supabase: Client, user_id: str) -> str:
    result = supabase.table("profiles")\
        .select("role")\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    if not result.data:
        raise ValueError(f"No profile for user {user_id}")
    return result.data[0]["role"]


def check_roles(supabase: Client, teacher_id: str, student_id: str):
    """Demo rows are only seeded for users whose roles could have created them"""
    teacher_role = get_role(supabase, teacher_id)
    for permission in ("classrooms:create", "grades:create", "attendance:create", "fees:create"):
        if not role_has_permission(teacher_role, permission):
            raise ValueError(f"User {teacher_id} ({teacher_role}) lacks {permission}")
    student_role = get_role(supabase, student_id)
    if student_role != "student":
        raise ValueError(f"User {student_id} is a {student_role}, not a student")


def seed_classrooms(supabase: Client, teacher_id: str, student_id: str) -> dict:
    """Create missing demo classrooms and enrol both users; returns name -> id"""
    logger.info("Seeding classrooms...")
    classroom_ids = {}
    created_count = 0

    for classroom in DEMO_CLASSROOMS:
        existing = supabase.table("classrooms")\
            .select("id")\
            .eq("name", classroom["name"])\
            .eq("created_by", teacher_id)\
            .limit(1)\
            .execute()
        if existing.data:
            classroom_id = existing.data[0]["id"]
        else:
            result = supabase.table("classrooms").insert({
                "name": classroom["name"],
                "subject": classroom["subject"],
                "classroom_code": generate_classroom_code(settings.classroom_code_length),
                "created_by": teacher_id
            }).execute()
            classroom_id = result.data[0]["id"]
            created_count += 1
        classroom_ids[classroom["name"]] = classroom_id

        for user_id, role in ((teacher_id, "teacher"), (student_id, "student")):
            member = supabase.table("classroom_members")\
                .select("id")\
                .eq("classroom_id", classroom_id)\
                .eq("user_id", user_id)\
                .execute()
            if not member.data:
                supabase.table("classroom_members").insert({
                    "classroom_id": classroom_id,
                    "user_id": user_id,
                    "role": role
                }).execute()

    logger.info(f"Classrooms seeded: {created_count} created, {len(classroom_ids) - created_count} reused")
    return classroom_ids


def seed_grades(supabase: Client, classroom_ids: dict, teacher_id: str, student_id: str) -> int:
    logger.info("Seeding grades...")
    now = datetime.now(timezone.utc)
    rows = [
        {
            "classroom_id": classroom_ids[classroom],
            "student_id": student_id,
            "assignment_title": title,
            "grade": grade,
            "max_grade": 100,
            "created_by": teacher_id,
            "created_at": (now - timedelta(days=days_ago)).isoformat()
        }
        for classroom, title, grade, days_ago in DEMO_GRADES
    ]
    supabase.table("grades").insert(rows).execute()
    return len(rows)


def seed_attendance(supabase: Client, classroom_ids: dict, teacher_id: str, student_id: str) -> int:
    logger.info("Seeding attendance...")
    today = date.today()
    rows = [
        {
            "classroom_id": classroom_ids[classroom],
            "student_id": student_id,
            "date": (today - timedelta(days=days_ago)).isoformat(),
            "status": status,
            "created_by": teacher_id
        }
        for classroom, status, days_ago in DEMO_ATTENDANCE
    ]
    supabase.table("attendance").insert(rows).execute()
    return len(rows)


def seed_fees(supabase: Client, student_id: str) -> int:
    logger.info("Seeding fees...")
    today = date.today()
    rows = [
        {
            "student_id": student_id,
            "fee_type": fee_type,
            "amount": amount,
            "due_date": (today + timedelta(days=due_in)).isoformat(),
            "description": description,
            "status": "unpaid"
        }
        for fee_type, amount, due_in, description in DEMO_FEES
    ]
    supabase.table("fees").insert(rows).execute()
    return len(rows)


def main():
    """Main function to seed demo data"""
    if len(sys.argv) != 3:
        logger.error("Usage: python -m app.scripts.seed_demo_data <teacher_user_id> <student_user_id>")
        sys.exit(2)
    teacher_id, student_id = sys.argv[1], sys.argv[2]

    try:
        supabase = SupabaseClient.get_service_client()

        logger.info("Starting demo data seeding...")
        check_roles(supabase, teacher_id, student_id)
        classroom_ids = seed_classrooms(supabase, teacher_id, student_id)
        grade_count = seed_grades(supabase, classroom_ids, teacher_id, student_id)
        attendance_count = seed_attendance(supabase, classroom_ids, teacher_id, student_id)
        fee_count = seed_fees(supabase, student_id)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {len(classroom_ids)} classrooms, {grade_count} grades, "
                    f"{attendance_count} attendance records, {fee_count} fees")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
