# Supabase table: messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Realtime: the table is part of the supabase_realtime publication (INSERT events)

"""
Expected Supabase table structure:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.user_id, not null)
- receiver_id: uuid (foreign key to profiles.user_id, nullable) - set for private messages
- classroom_id: uuid (foreign key to classrooms.id, nullable) - set for announcements
- message: text (not null)
- message_type: text (not null) - values: announcement, private
- attachment_url: text (nullable)
- attachment_name: text (nullable)
- created_at: timestamp (default: now())

Rows are append-only.
"""
