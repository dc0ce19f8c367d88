from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import ProfileUpdate, ProfileResponse, ProfileWithGroupsResponse
from app.modules.users.service import UserService
from app.core.dependencies import get_current_user_id, user_can_access_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=ProfileWithGroupsResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Get the caller's profile with their groups"""
    return service.get_profile_with_groups(current_user["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Update the caller's display name or avatar"""
    return service.update_profile(current_user["id"], profile_data)


@router.get("/me/groups", response_model=List[dict])
async def get_my_groups(
    current_user: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return service.get_user_groups(current_user["id"])


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_user(
    user_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
    supabase: Client = Depends(get_supabase)
):
    """Get user by ID (only if same user or shares a group)"""
    if not user_can_access_user(current_user["id"], user_id, supabase):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User not accessible")
    return service.get_profile(user_id)
