from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import OtpRequest, OtpResponse, VerifyRequest, TokenResponse
from app.modules.auth.service import AuthService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/otp", response_model=OtpResponse)
async def request_otp(
    otp_data: OtpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a one-time sign-in code by SMS"""
    return service.request_otp(otp_data)


@router.post("/verify", response_model=TokenResponse)
async def verify_otp(
    verify_data: VerifyRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Verify the code and get an access token"""
    return service.verify_otp(verify_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Get current authenticated user merged with their profile."""
    profile_result = supabase.table("profiles")\
        .select("*")\
        .eq("id", current_user["id"])\
        .execute()
    profile = profile_result.data[0] if profile_result.data else None
    return {**current_user, "profile": profile}
