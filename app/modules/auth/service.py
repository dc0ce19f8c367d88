import hashlib
import logging
import time
from supabase import Client
from app.modules.auth.schemas import OtpRequest, OtpResponse, VerifyRequest, TokenResponse
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def request_otp(self, otp_data: OtpRequest) -> OtpResponse:
        """Ask Supabase Auth to text a one-time code to the phone"""
        try:
            self.supabase.auth.sign_in_with_otp({"phone": otp_data.phone})
            return OtpResponse(phone=otp_data.phone, message="Verification code sent")
        except Exception as e:
            error_message = str(e)
            logger.warning(f"OTP request failed for {otp_data.phone[-4:]}: {error_message}")
            if "rate limit" in error_message.lower():
                raise HTTPException(status_code=429, detail="Too many code requests, try again later")
            raise HTTPException(status_code=500, detail=f"Could not send code: {error_message}")

    def verify_otp(self, verify_data: VerifyRequest) -> TokenResponse:
        """Exchange phone + code for a session and make sure a profile exists"""
        try:
            auth_response = self.supabase.auth.verify_otp({
                "phone": verify_data.phone,
                "token": verify_data.code,
                "type": "sms"
            })
        except Exception as e:
            error_message = str(e)
            if "expired" in error_message.lower() or "invalid" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired code")
            raise HTTPException(status_code=500, detail=f"Verification failed: {error_message}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid or expired code")

        user = auth_response.user
        is_new_user = self._ensure_profile(user.id, verify_data.phone, verify_data.display_name)

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            token_type="bearer",
            user_id=user.id,
            phone=verify_data.phone,
            is_new_user=is_new_user
        )

    def _ensure_profile(self, user_id: str, phone: str, display_name: str = None) -> bool:
        """Create the profile row on first sign-in. Returns True when it was created."""
        try:
            existing = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", user_id)\
                .execute()
            if existing.data:
                return False
            self.supabase.table("profiles").insert({
                "id": user_id,
                "phone": phone,
                "display_name": (display_name or "").strip() or None
            }).execute()
            logger.info(f"Created profile for user {user_id}")
            return True
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to create profile: {e}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "phone": user.phone,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Tokens are stateless JWTs; sign_out only revokes the refresh token
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
