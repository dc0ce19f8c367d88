from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupWithMembersResponse, GroupMemberResponse
)
from app.modules.groups.service import GroupService
from app.core.dependencies import get_current_user_id, check_group_member, check_group_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the caller becomes its owner"""
    return service.create_group(group_data, current_user["id"])


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    limit: int = 10,
    offset: int = 0,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """List groups the user is a member of"""
    return service.list_groups(current_user["id"], limit=limit, offset=offset)


@router.get("/{group_id}", response_model=GroupWithMembersResponse)
async def get_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Get group with its members (only if user is a member)"""
    check_group_member(group_id, current_user, supabase)
    return service.get_group_with_members(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Rename the group or change its emoji (owner only)"""
    check_group_owner(group_id, current_user, supabase)
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete group (owner only)"""
    check_group_owner(group_id, current_user, supabase)
    service.delete_group(group_id)
    return None


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """List all members of a group (only if user is a member)"""
    check_group_member(group_id, current_user, supabase)
    group = service.get_group_by_id(group_id)
    return service.list_members(group_id, owner_id=group.owner_id)


@router.delete("/{group_id}/members/{user_id}", status_code=204)
async def remove_member(
    group_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove a member (owner) or leave the group (self)"""
    check_group_member(group_id, current_user, supabase)
    service.remove_member(group_id, user_id, current_user["id"])
    return None
