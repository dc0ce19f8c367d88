# Supabase tables: push_tokens, notification_settings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

push_tokens:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id on delete cascade, not null)
- token: text (unique, not null) - Expo push token, e.g. 'ExponentPushToken[xxxx]'
- platform: text (not null) - values: ios, android
- active: boolean (not null, default: true) - false after DeviceNotRegistered
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

notification_settings:
- user_id: uuid (primary key, foreign key to profiles.id on delete cascade)
- enabled: boolean (not null, default: true)
- timezone: text (not null, default: 'UTC') - IANA name
- quiet_hours_start: text (nullable) - 'HH:MM' local
- quiet_hours_end: text (nullable) - 'HH:MM' local, may be earlier than start (wraps midnight)
- next_nudge_at: timestamp (nullable) - UTC time of today's nudge, cleared once handled
- nudge_date: date (nullable) - local day next_nudge_at was picked for
- last_nudged_at: timestamp (nullable)
- updated_at: timestamp (nullable)

RLS: users read and write only their own rows. The schedule/send
functions run with the service role key.
"""
