import random
from datetime import date, datetime
from supabase import Client
from app.config import settings
from app.core.clock import local_today, parse_timestamp, utcnow
from app.core.errors import to_http_exception
from app.modules.feelings.service import FeelingService
from app.modules.notifications.nudge_time import pick_nudge_time
from app.modules.notifications.push_client import ExpoPushClient, PushMessage
from app.modules.notifications.schemas import (
    PushTokenRegister, PushTokenResponse, NotificationSettingsUpdate,
    NotificationSettingsResponse, ScheduleResult, SendResult
)
from typing import Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

NUDGES = [
    ("How are you feeling? 🎨", "Pick a color for today and let your people know."),
    ("Color check 🌈", "Your group is waiting to see your color today."),
    ("Quick one", "One color, one word. How's today going?"),
    ("Hey you 👋", "Take a second to share how you feel today."),
    ("Your ring has a gap", "Add your color so your friends can see how you're doing."),
]

# Columns that invalidate today's pick when they change
_SCHEDULE_FIELDS = ("timezone", "quiet_hours_start", "quiet_hours_end", "enabled")


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class NotificationService:
    def __init__(
        self,
        supabase: Client,
        push_client: Optional[ExpoPushClient] = None,
        rng: Optional[random.Random] = None
    ):
        self.supabase = supabase
        self.push_client = push_client or ExpoPushClient()
        self.rng = rng or random.Random()
        self.feelings = FeelingService(supabase)

    # Push tokens

    def register_token(self, user_id: str, token_data: PushTokenRegister) -> PushTokenResponse:
        """Register a device token; an existing token moves to the caller and is reactivated"""
        try:
            existing = self.supabase.table("push_tokens")\
                .select("*")\
                .eq("token", token_data.token)\
                .execute()
            if existing.data:
                result = self.supabase.table("push_tokens")\
                    .update({
                        "user_id": user_id,
                        "platform": token_data.platform,
                        "active": True,
                        "updated_at": utcnow().isoformat()
                    })\
                    .eq("token", token_data.token)\
                    .execute()
            else:
                result = self.supabase.table("push_tokens").insert({
                    "user_id": user_id,
                    "token": token_data.token,
                    "platform": token_data.platform,
                    "active": True
                }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to register push token")
            return PushTokenResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    def unregister_token(self, user_id: str, token: str) -> bool:
        try:
            result = self.supabase.table("push_tokens")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("token", token)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise to_http_exception(e)

    def list_tokens(self, user_id: str, active_only: bool = False) -> List[PushTokenResponse]:
        try:
            query = self.supabase.table("push_tokens")\
                .select("*")\
                .eq("user_id", user_id)
            if active_only:
                query = query.eq("active", True)
            result = query.execute()
            return [PushTokenResponse(**row) for row in result.data or []]
        except Exception as e:
            raise to_http_exception(e)

    def deactivate_token(self, token: str) -> None:
        self.supabase.table("push_tokens")\
            .update({"active": False, "updated_at": utcnow().isoformat()})\
            .eq("token", token)\
            .execute()
        logger.info(f"Deactivated unregistered push token ...{token[-8:]}")

    # Settings

    def _get_settings_row(self, user_id: str) -> Optional[dict]:
        result = self.supabase.table("notification_settings")\
            .select("*")\
            .eq("user_id", user_id)\
            .execute()
        return result.data[0] if result.data else None

    def get_settings(self, user_id: str) -> NotificationSettingsResponse:
        try:
            row = self._get_settings_row(user_id)
            if not row:
                return NotificationSettingsResponse(user_id=user_id, timezone=settings.default_timezone)
            return NotificationSettingsResponse(**row)
        except Exception as e:
            raise to_http_exception(e)

    def update_settings(self, user_id: str, update: NotificationSettingsUpdate) -> NotificationSettingsResponse:
        """Change settings; a pending nudge is re-picked when its inputs change"""
        try:
            changes = {k: getattr(update, k) for k in update.model_fields_set}
            if "enabled" in changes and changes["enabled"] is None:
                del changes["enabled"]
            if "timezone" in changes and changes["timezone"] is None:
                del changes["timezone"]

            row = self._get_settings_row(user_id)
            if any(k in changes for k in _SCHEDULE_FIELDS):
                changes["next_nudge_at"] = None
                changes["nudge_date"] = None
            changes["updated_at"] = utcnow().isoformat()

            if row:
                result = self.supabase.table("notification_settings")\
                    .update(changes)\
                    .eq("user_id", user_id)\
                    .execute()
            else:
                insert_data = {
                    "user_id": user_id,
                    "enabled": True,
                    "timezone": settings.default_timezone,
                    **changes
                }
                result = self.supabase.table("notification_settings").insert(insert_data).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save notification settings")
            return NotificationSettingsResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    # Scheduled functions

    def _settings_for_scheduling(self) -> List[dict]:
        """Enabled settings rows, plus default rows for token holders who never saved settings"""
        rows = self.supabase.table("notification_settings")\
            .select("*")\
            .execute().data or []
        known = {r["user_id"] for r in rows}
        enabled = [r for r in rows if r.get("enabled", True)]

        token_rows = self.supabase.table("push_tokens")\
            .select("user_id")\
            .eq("active", True)\
            .execute().data or []
        for user_id in sorted({t["user_id"] for t in token_rows} - known):
            result = self.supabase.table("notification_settings").insert({
                "user_id": user_id,
                "enabled": True,
                "timezone": settings.default_timezone
            }).execute()
            if result.data:
                enabled.append(result.data[0])
        return enabled

    def schedule_nudges(self, now: Optional[datetime] = None) -> ScheduleResult:
        """Pick each user's random nudge time for their current local day, once per day"""
        now = now or utcnow()
        outcome = ScheduleResult()
        for row in self._settings_for_scheduling():
            user_id = row["user_id"]
            try:
                day = local_today(row.get("timezone"), now)
                last = parse_timestamp(row.get("last_nudged_at"))
                if _as_date(row.get("nudge_date")) == day or (
                    last is not None and local_today(row.get("timezone"), last) == day
                ):
                    outcome.skipped += 1
                    continue

                at = pick_nudge_time(
                    day,
                    row.get("timezone"),
                    settings.nudge_window_start,
                    settings.nudge_window_end,
                    row.get("quiet_hours_start"),
                    row.get("quiet_hours_end"),
                    rng=self.rng,
                    not_before=now
                )
                self.supabase.table("notification_settings")\
                    .update({
                        "next_nudge_at": at.isoformat() if at else None,
                        "nudge_date": day.isoformat()
                    })\
                    .eq("user_id", user_id)\
                    .execute()
                if at is None:
                    outcome.unschedulable += 1
                else:
                    outcome.scheduled += 1
            except Exception as e:
                logger.error(f"Failed to schedule nudge for {user_id}: {e}")
                outcome.unschedulable += 1
        logger.info(
            f"Nudge scheduling: {outcome.scheduled} scheduled, {outcome.skipped} skipped, "
            f"{outcome.unschedulable} unschedulable"
        )
        return outcome

    def _mark_handled(self, user_id: str, nudged_at: Optional[datetime]) -> None:
        update = {"next_nudge_at": None}
        if nudged_at is not None:
            update["last_nudged_at"] = nudged_at.isoformat()
        self.supabase.table("notification_settings")\
            .update(update)\
            .eq("user_id", user_id)\
            .execute()

    def send_due_nudges(self, now: Optional[datetime] = None) -> SendResult:
        """Push a nudge to everyone whose time has come and who has not logged today"""
        now = now or utcnow()
        outcome = SendResult()
        due = self.supabase.table("notification_settings")\
            .select("*")\
            .eq("enabled", True)\
            .lte("next_nudge_at", now.isoformat())\
            .execute().data or []

        messages: List[PushMessage] = []
        owners: Dict[str, str] = {}
        for row in due:
            user_id = row["user_id"]
            try:
                day = _as_date(row.get("nudge_date")) or local_today(row.get("timezone"), now)
                if self.feelings.has_logged_today(user_id, day):
                    outcome.skipped_logged += 1
                    self._mark_handled(user_id, None)
                    continue

                tokens = self.supabase.table("push_tokens")\
                    .select("token")\
                    .eq("user_id", user_id)\
                    .eq("active", True)\
                    .execute().data or []
                if not tokens:
                    outcome.no_tokens += 1
                    self._mark_handled(user_id, None)
                    continue
            except Exception as e:
                # Left due; the next run retries this user
                logger.error(f"Failed to prepare nudge for {user_id}: {e}")
                outcome.failed += 1
                continue

            title, body = self.rng.choice(NUDGES)
            for t in tokens:
                messages.append(PushMessage(
                    to=t["token"],
                    title=title,
                    body=body,
                    data={"type": "daily_nudge", "date": day.isoformat()}
                ))
                owners[t["token"]] = user_id

        delivered_users = set()
        retry_users = set()
        for ticket in self.push_client.send(messages):
            user_id = owners[ticket.token]
            if ticket.ok:
                outcome.sent += 1
                delivered_users.add(user_id)
                continue
            outcome.failed += 1
            logger.warning(f"Nudge to {user_id} failed: {ticket.error or ticket.message}")
            if ticket.device_not_registered:
                try:
                    self.deactivate_token(ticket.token)
                    outcome.deactivated_tokens += 1
                except Exception as e:
                    logger.error(f"Failed to deactivate push token for {user_id}: {e}")
            elif ticket.error == "TransportError":
                retry_users.add(user_id)

        for user_id in set(owners.values()):
            try:
                if user_id in delivered_users:
                    self._mark_handled(user_id, now)
                elif user_id not in retry_users:
                    # Every token was rejected; drop today's nudge
                    self._mark_handled(user_id, None)
            except Exception as e:
                logger.error(f"Failed to mark nudge handled for {user_id}: {e}")

        logger.info(
            f"Nudge dispatch: {outcome.sent} sent, {outcome.failed} failed, "
            f"{outcome.skipped_logged} already logged, {outcome.no_tokens} without tokens"
        )
        return outcome
