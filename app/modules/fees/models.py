# Supabase table: fees
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- student_id: uuid (foreign key to profiles.user_id, not null)
- fee_type: text (not null) - e.g. tuition, lab, trip
- amount: numeric (not null)
- due_date: date (not null)
- status: text (not null, default: 'unpaid') - values: unpaid, paid
- paid_date: date (nullable)
- description: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
