# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- emoji: text (not null, default: '🌈')
- owner_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id on delete cascade, not null)
- user_id: uuid (foreign key to profiles.id on delete cascade, not null)
- created_at: timestamp (default: now()) - join time, orders the ring slices
- unique constraint on (group_id, user_id)
- trigger enforce_group_member_limit: raises 'Group is full' (P0001) on the 7th insert

RLS: members read the group and its member list; only owner_id may update
or delete the group.
"""
