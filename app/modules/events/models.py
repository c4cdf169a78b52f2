# Supabase table: events
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- event_date: timestamp (not null)
- event_type: text (not null) - values: assignment, exam, meeting, holiday, announcement, other
- audience: text[] (not null, default: {teacher,student,parent}) - roles that can see the event
- classroom_id: uuid (foreign key to classrooms.id, nullable)
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

An event is visible to its creator and to every user whose role is in audience.
"""
