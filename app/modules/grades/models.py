# Supabase table: grades
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Realtime: INSERT events are published for live grade lists

"""
Expected Supabase table structure:
- id: uuid (primary key)
- classroom_id: uuid (foreign key to classrooms.id, not null)
- student_id: uuid (foreign key to profiles.user_id, not null)
- assignment_title: text (not null)
- grade: numeric (nullable) - null until marked
- max_grade: numeric (not null, default: 100)
- comments: text (nullable)
- date_assigned: date (nullable)
- date_submitted: date (nullable)
- created_by: uuid (foreign key to auth.users.id, not null) - grading teacher
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
