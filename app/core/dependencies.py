"""
Core dependencies for route protection and membership checking.

These mirror the row-level security predicates of the schema so the API
returns clear 403/404 errors instead of empty result sets.
"""

from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional
import hmac
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_user_group_ids(user_id: str, supabase: Client) -> List[str]:
    """Return the ids of every group the user belongs to."""
    try:
        result = supabase.table("group_members")\
            .select("group_id")\
            .eq("user_id", user_id)\
            .execute()
        return [g["group_id"] for g in result.data] if result.data else []
    except Exception as e:
        logger.error(f"Error getting user group ids: {e}")
        return []


def is_group_member(group_id: str, user_id: str, supabase: Client) -> bool:
    member_result = supabase.table("group_members")\
        .select("id")\
        .eq("group_id", group_id)\
        .eq("user_id", user_id)\
        .execute()
    return bool(member_result.data)


def user_can_access_user(current_user_id: str, target_user_id: str, supabase: Client) -> bool:
    """True if target is self or shares at least one group with current user"""
    if current_user_id == target_user_id:
        return True
    my_group_ids = get_user_group_ids(current_user_id, supabase)
    if not my_group_ids:
        return False
    member_result = supabase.table("group_members")\
        .select("id")\
        .eq("user_id", target_user_id)\
        .in_("group_id", my_group_ids)\
        .limit(1)\
        .execute()
    return bool(member_result.data)


def check_group_member(
    group_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Check if user is a member of a group"""
    group_result = supabase.table("groups")\
        .select("id")\
        .eq("id", group_id)\
        .maybe_single()\
        .execute()

    if not group_result or not group_result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )

    if not is_group_member(group_id, user_data["id"], supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this group"
        )

    return user_data


def check_group_owner(
    group_id: str,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Check if user is the owner of a group"""
    group_result = supabase.table("groups")\
        .select("owner_id")\
        .eq("id", group_id)\
        .maybe_single()\
        .execute()

    if not group_result or not group_result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )

    if group_result.data.get("owner_id") != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the group owner can perform this action"
        )

    return user_data


def require_cron_secret(x_cron_secret: Optional[str] = Header(default=None)) -> None:
    """Guard for the scheduled function endpoints."""
    if not settings.cron_secret:
        logger.error("CRON_SECRET is not configured; refusing function call")
        raise HTTPException(status_code=503, detail="Function endpoints are not configured")
    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, settings.cron_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron secret")
