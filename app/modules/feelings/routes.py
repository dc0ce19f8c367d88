from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.feelings.palette import palette
from app.modules.feelings.schemas import (
    FeelingCreate, FeelingUpdate, FeelingResponse, FeelingEverywhereResponse
)
from app.modules.feelings.service import FeelingService, to_response
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["feelings"])


def get_feeling_service(supabase: Client = Depends(get_supabase)) -> FeelingService:
    return FeelingService(supabase)


@router.get("/feelings/palette", response_model=List[dict])
async def get_palette():
    """Colors with their hex value and suggested words"""
    return palette()


@router.post("/feelings", response_model=FeelingEverywhereResponse, status_code=201)
async def log_feeling_everywhere(
    feeling_data: FeelingCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service)
):
    """Share today's feeling with all of the caller's groups"""
    return service.log_feeling_everywhere(current_user["id"], feeling_data)


@router.post("/groups/{group_id}/feelings", response_model=FeelingResponse, status_code=201)
async def log_feeling(
    group_id: str,
    feeling_data: FeelingCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service),
    supabase: Client = Depends(get_supabase)
):
    """Share today's feeling with one group (once per day)"""
    check_group_member(group_id, current_user, supabase)
    return service.log_feeling(group_id, current_user["id"], feeling_data)


@router.get("/groups/{group_id}/feelings", response_model=List[FeelingResponse])
async def feeling_history(
    group_id: str,
    days: int = 14,
    user_id: Optional[str] = None,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service),
    supabase: Client = Depends(get_supabase)
):
    check_group_member(group_id, current_user, supabase)
    return service.history(group_id, current_user["id"], days=days, user_id=user_id)


@router.get("/groups/{group_id}/feelings/today", response_model=List[FeelingResponse])
async def feelings_today(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service),
    supabase: Client = Depends(get_supabase)
):
    check_group_member(group_id, current_user, supabase)
    return service.get_today(group_id, current_user["id"])


@router.get("/groups/{group_id}/feelings/latest", response_model=List[FeelingResponse])
async def latest_feelings(
    group_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service),
    supabase: Client = Depends(get_supabase)
):
    """Each member's most recent feeling"""
    check_group_member(group_id, current_user, supabase)
    return [to_response(row) for row in service.latest_by_member(group_id).values()]


@router.patch("/feelings/{feeling_id}", response_model=FeelingResponse)
async def update_feeling(
    feeling_id: str,
    feeling_data: FeelingUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service)
):
    """Edit a feeling within 10 minutes of sharing it"""
    return service.update_feeling(feeling_id, current_user["id"], feeling_data)


@router.delete("/feelings/{feeling_id}", status_code=204)
async def delete_feeling(
    feeling_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: FeelingService = Depends(get_feeling_service)
):
    service.delete_feeling(feeling_id, current_user["id"])
    return None
