from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.schemas import GroupMemberResponse
from app.modules.invites.schemas import (
    InviteCreate, InviteResponse, InviteCreatedResponse, InvitePreviewResponse
)
from app.modules.invites.service import InviteService
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["invites"])


def get_invite_service(supabase: Client = Depends(get_supabase)) -> InviteService:
    return InviteService(supabase)


@router.post("/groups/{group_id}/invites", response_model=InviteCreatedResponse, status_code=201)
async def create_invite(
    group_id: str,
    invite_data: InviteCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service),
    supabase: Client = Depends(get_supabase)
):
    """Create an invite code for the group (members only)"""
    check_group_member(group_id, current_user, supabase)
    return service.create_invite(group_id, current_user["id"], invite_data)


@router.get("/groups/{group_id}/invites", response_model=List[InviteResponse])
async def list_group_invites(
    group_id: str,
    status: Optional[str] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service),
    supabase: Client = Depends(get_supabase)
):
    check_group_member(group_id, current_user, supabase)
    return service.list_group_invites(group_id, status=status)


@router.get("/invites/{code}", response_model=InvitePreviewResponse)
async def preview_invite(
    code: str,
    current_user: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service)
):
    """Preview the group behind an invite code"""
    return service.preview_invite(code)


@router.post("/invites/{code}/accept", response_model=GroupMemberResponse, status_code=201)
async def accept_invite(
    code: str,
    current_user: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service)
):
    """Join the group behind an invite code"""
    return service.accept_invite(code, current_user["id"])


@router.post("/invites/id/{invite_id}/revoke", response_model=InviteResponse)
async def revoke_invite(
    invite_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service)
):
    return service.revoke_invite(invite_id, current_user["id"])
