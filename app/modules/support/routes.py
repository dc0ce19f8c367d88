from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.support.schemas import (
    SupportComposeRequest, SmsComposePayload, SupportMessageResponse, TemplateResponse
)
from app.modules.support.service import SupportService
from app.core.dependencies import get_current_user_id, check_group_member
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/support", tags=["support"])


def get_support_service(supabase: Client = Depends(get_supabase)) -> SupportService:
    return SupportService(supabase)


@router.get("/templates", response_model=List[TemplateResponse])
async def list_templates(
    current_user: Dict = Depends(get_current_user_id),
    service: SupportService = Depends(get_support_service)
):
    return service.list_templates()


@router.post("/compose", response_model=SmsComposePayload)
async def compose_support(
    request: SupportComposeRequest,
    current_user: Dict = Depends(get_current_user_id),
    service: SupportService = Depends(get_support_service),
    supabase: Client = Depends(get_supabase)
):
    """Build the SMS compose payload for a supportive message to a group-mate"""
    check_group_member(request.group_id, current_user, supabase)
    return service.compose_support(request, current_user["id"])


@router.get("/sent", response_model=List[SupportMessageResponse])
async def list_sent(
    limit: int = 20,
    current_user: Dict = Depends(get_current_user_id),
    service: SupportService = Depends(get_support_service)
):
    return service.list_sent(current_user["id"], limit=limit)
