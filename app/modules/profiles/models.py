# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key)
- user_id: uuid (unique, references auth.users.id, not null)
- email: text (not null)
- role: user_role enum (not null) - values: teacher, student, parent
- first_name: text (nullable)
- last_name: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Database functions used by RLS policies:
- get_current_user_role() -> text
- is_teacher() -> boolean
"""
