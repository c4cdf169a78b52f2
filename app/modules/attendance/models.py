# Supabase table: attendance
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Realtime: INSERT events are published for live attendance lists

"""
Expected Supabase table structure:
- id: uuid (primary key)
- classroom_id: uuid (foreign key to classrooms.id, not null)
- student_id: uuid (foreign key to profiles.user_id, not null)
- date: date (not null)
- status: text (not null) - values: present, absent, late, excused
- notes: text (nullable)
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
"""
