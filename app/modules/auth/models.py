# Supabase Auth (phone OTP)
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Phone sign-in with one-time SMS codes (auth.users table)
# - Session management
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_in_with_otp({"phone": ...}) - Send an SMS code
- auth.verify_otp({"phone": ..., "token": ..., "type": "sms"}) - Exchange code for a session
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

On first successful verification a row is upserted into public.profiles
(see app/modules/users/models.py) keyed by the auth user id.
"""
