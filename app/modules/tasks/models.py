# Supabase table: tasks
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null) - owner
- title: text (not null)
- description: text (nullable)
- due_date: date (nullable)
- completed: boolean (not null, default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
