# Supabase tables: classrooms, classroom_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

classrooms:
- id: uuid (primary key)
- name: text (not null)
- subject: text (nullable)
- classroom_code: text (unique, not null) - 6 uppercase alphanumerics, the join key
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

classroom_members:
- id: uuid (primary key)
- classroom_id: uuid (foreign key to classrooms.id, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: user_role enum (not null) - the member's profile role at join time
- joined_at: timestamp (default: now())
- unique constraint on (user_id, classroom_id)
"""
