# Supabase table: support_messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

support_messages:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.id, not null)
- recipient_id: uuid (foreign key to profiles.id, not null)
- group_id: uuid (foreign key to groups.id on delete cascade, not null)
- feeling_id: uuid (foreign key to feelings.id on delete set null, nullable)
- template_key: text (not null)
- body: text (not null)
- created_at: timestamp (default: now())

The server never sends these messages. It prepares the text and an sms:
link; the sender's phone opens its messaging app and the user taps send.
"""
