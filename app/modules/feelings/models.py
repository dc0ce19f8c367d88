# Supabase table: feelings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

feelings:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id on delete cascade, not null)
- user_id: uuid (foreign key to profiles.id on delete cascade, not null)
- color: feeling_color enum (not null) - red, orange, yellow, green, blue, purple, pink, gray
- word: text (not null) - a single word, max 24 chars
- reason: text (nullable) - optional note, max 280 chars
- feeling_date: date (not null) - the author's local calendar day
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (group_id, user_id, feeling_date)

RLS: members of the group read its feelings; a user inserts only rows with
user_id = auth.uid() in groups they belong to, and updates/deletes their own
rows only while now() - created_at <= interval '10 minutes'.
"""
