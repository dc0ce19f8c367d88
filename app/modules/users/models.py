# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- phone: text (unique, not null) - E.164, synced from auth.users at first sign-in
- display_name: text (nullable)
- avatar_url: text (nullable) - storage reference or emoji avatar
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

RLS: a user can read their own profile and the profiles of anyone they
share a group with; a user can only update their own profile.
"""
