from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.notifications.schemas import (
    PushTokenRegister, PushTokenResponse, NotificationSettingsUpdate,
    NotificationSettingsResponse, ScheduleResult, SendResult
)
from app.modules.notifications.service import NotificationService
from app.core.dependencies import get_current_user_id, require_cron_secret
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])
functions_router = APIRouter(
    prefix="/functions",
    tags=["functions"],
    dependencies=[Depends(require_cron_secret)]
)


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


def get_function_service(supabase: Client = Depends(get_service_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.post("/tokens", response_model=PushTokenResponse, status_code=201)
async def register_token(
    token_data: PushTokenRegister,
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Register this device's Expo push token"""
    return service.register_token(current_user["id"], token_data)


@router.get("/tokens", response_model=List[PushTokenResponse])
async def list_tokens(
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    return service.list_tokens(current_user["id"])


@router.delete("/tokens/{token}", status_code=204)
async def unregister_token(
    token: str,
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    if not service.unregister_token(current_user["id"], token):
        raise HTTPException(status_code=404, detail="Push token not found")
    return None


@router.get("/settings", response_model=NotificationSettingsResponse)
async def get_settings(
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    return service.get_settings(current_user["id"])


@router.put("/settings", response_model=NotificationSettingsResponse)
async def update_settings(
    update: NotificationSettingsUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: NotificationService = Depends(get_notification_service)
):
    """Toggle nudges, set timezone or quiet hours"""
    return service.update_settings(current_user["id"], update)


@functions_router.post("/schedule-nudges", response_model=ScheduleResult)
async def schedule_nudges(service: NotificationService = Depends(get_function_service)):
    """Assign each user a random nudge time for today (called by cron)"""
    return service.schedule_nudges()


@functions_router.post("/send-nudges", response_model=SendResult)
async def send_nudges(service: NotificationService = Depends(get_function_service)):
    """Send nudges that are due to users who have not logged today (called by cron)"""
    return service.send_due_nudges()
