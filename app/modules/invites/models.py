# Supabase table: invites
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

invites:
- id: uuid (primary key)
- code: text (unique, not null) - short shareable code, e.g. 'K7QX4MZP'
- group_id: uuid (foreign key to groups.id on delete cascade, not null)
- inviter_id: uuid (foreign key to profiles.id, not null)
- phone: text (nullable) - invitee phone when sent from contacts
- status: text (not null, default: 'pending') - values: pending, accepted, revoked
- accepted_by: uuid (foreign key to profiles.id, nullable)
- created_at: timestamp (default: now())
- expires_at: timestamp (not null)
- accepted_at: timestamp (nullable)

RLS: members of the group read its invites; anyone authenticated may read a
single invite by code (preview); inviter or group owner may revoke.
"""
