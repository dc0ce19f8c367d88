from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from app.database.supabase_client import get_supabase
from app.modules.ring.schemas import RingResponse
from app.modules.ring.service import RingService
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/groups", tags=["ring"])


def get_ring_service(supabase: Client = Depends(get_supabase)) -> RingService:
    return RingService(supabase)


@router.get("/{group_id}/ring", response_model=RingResponse)
async def get_ring(
    group_id: str,
    today_only: bool = False,
    size: float = Query(default=200, gt=0, le=2000),
    current_user: Dict = Depends(get_current_user_id),
    service: RingService = Depends(get_ring_service),
    supabase: Client = Depends(get_supabase)
):
    """Six-slice ring of each member's latest color"""
    check_group_member(group_id, current_user, supabase)
    return service.get_ring(group_id, current_user["id"], today_only=today_only, size=size)


@router.get("/{group_id}/ring.svg")
async def get_ring_svg(
    group_id: str,
    today_only: bool = False,
    size: float = Query(default=200, gt=0, le=2000),
    current_user: Dict = Depends(get_current_user_id),
    service: RingService = Depends(get_ring_service),
    supabase: Client = Depends(get_supabase)
):
    check_group_member(group_id, current_user, supabase)
    svg = service.get_ring_svg(group_id, current_user["id"], today_only=today_only, size=size)
    return Response(content=svg, media_type="image/svg+xml")
