from supabase import Client
from app.config import settings
from app.core.clock import local_today, parse_timestamp, utcnow
from app.core.dependencies import get_user_group_ids
from app.core.errors import to_http_exception
from app.modules.feelings.schemas import (
    FeelingCreate, FeelingUpdate, FeelingResponse, GroupLogResult, FeelingEverywhereResponse
)
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

ALREADY_LOGGED = "You already shared a feeling in this group today"


def edit_deadline(created_at: datetime) -> datetime:
    return created_at + timedelta(minutes=settings.feeling_edit_window_minutes)


def is_within_edit_window(created_at, now: Optional[datetime] = None) -> bool:
    created = parse_timestamp(created_at)
    return (now or utcnow()) <= edit_deadline(created)


def to_response(row: dict, now: Optional[datetime] = None) -> FeelingResponse:
    created = parse_timestamp(row["created_at"])
    deadline = edit_deadline(created)
    return FeelingResponse(
        **{k: v for k, v in row.items() if k not in ("editable_until", "is_editable")},
        editable_until=deadline,
        is_editable=(now or utcnow()) <= deadline
    )


class FeelingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_timezone(self, user_id: str) -> Optional[str]:
        result = self.supabase.table("notification_settings")\
            .select("timezone")\
            .eq("user_id", user_id)\
            .execute()
        if result.data:
            return result.data[0].get("timezone")
        return None

    def today_for(self, user_id: str, now: Optional[datetime] = None) -> date:
        """The user's local calendar day"""
        return local_today(self.get_user_timezone(user_id), now)

    def log_feeling(self, group_id: str, user_id: str, feeling_data: FeelingCreate) -> FeelingResponse:
        """Record today's feeling; one per (group, user, local day)"""
        try:
            feeling_date = self.today_for(user_id)
            existing = self.supabase.table("feelings")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .eq("feeling_date", feeling_date.isoformat())\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail=ALREADY_LOGGED)

            result = self.supabase.table("feelings").insert({
                "group_id": group_id,
                "user_id": user_id,
                "color": feeling_data.color.value,
                "word": feeling_data.word,
                "reason": feeling_data.reason,
                "feeling_date": feeling_date.isoformat()
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to log feeling")

            logger.info(f"Feeling logged by {user_id} in group {group_id} for {feeling_date}")
            return to_response(result.data[0])
        except Exception as e:
            raise to_http_exception(e, conflict_detail=ALREADY_LOGGED)

    def log_feeling_everywhere(self, user_id: str, feeling_data: FeelingCreate) -> FeelingEverywhereResponse:
        """Share the same feeling with every group the user belongs to"""
        results = []
        for group_id in get_user_group_ids(user_id, self.supabase):
            try:
                feeling = self.log_feeling(group_id, user_id, feeling_data)
                results.append(GroupLogResult(group_id=group_id, status="created", feeling=feeling))
            except HTTPException as e:
                if e.status_code != 409:
                    raise
                results.append(GroupLogResult(group_id=group_id, status="already_logged"))
        created = sum(1 for r in results if r.status == "created")
        return FeelingEverywhereResponse(
            results=results,
            created=created,
            already_logged=len(results) - created
        )

    def get_feeling(self, feeling_id: str) -> dict:
        result = self.supabase.table("feelings")\
            .select("*")\
            .eq("id", feeling_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Feeling not found")
        return result.data[0]

    def _check_editable(self, feeling: dict, user_id: str) -> None:
        if feeling["user_id"] != user_id:
            raise HTTPException(status_code=403, detail="You can only change your own feelings")
        if not is_within_edit_window(feeling["created_at"]):
            raise HTTPException(status_code=403, detail="Edit window has closed")

    def update_feeling(self, feeling_id: str, user_id: str, feeling_data: FeelingUpdate) -> FeelingResponse:
        """Edit color, word or reason within the edit window"""
        try:
            feeling = self.get_feeling(feeling_id)
            self._check_editable(feeling, user_id)

            update_data = {"updated_at": utcnow().isoformat()}
            if feeling_data.color is not None:
                update_data["color"] = feeling_data.color.value
            if feeling_data.word is not None:
                update_data["word"] = feeling_data.word
            if "reason" in feeling_data.model_fields_set:
                update_data["reason"] = (feeling_data.reason or "").strip() or None

            result = self.supabase.table("feelings")\
                .update(update_data)\
                .eq("id", feeling_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Feeling not found")
            return to_response(result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    def delete_feeling(self, feeling_id: str, user_id: str) -> bool:
        try:
            feeling = self.get_feeling(feeling_id)
            self._check_editable(feeling, user_id)
            result = self.supabase.table("feelings")\
                .delete()\
                .eq("id", feeling_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise to_http_exception(e)

    def get_today(self, group_id: str, user_id: str) -> List[FeelingResponse]:
        """Feelings shared in the group on the caller's local day"""
        try:
            today = self.today_for(user_id)
            result = self.supabase.table("feelings")\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("feeling_date", today.isoformat())\
                .order("created_at")\
                .execute()
            return [to_response(row) for row in result.data or []]
        except Exception as e:
            raise to_http_exception(e)

    def latest_by_member(self, group_id: str, member_ids: Optional[List[str]] = None) -> Dict[str, dict]:
        """Most recent feeling row per member, keyed by user id.

        Only feelings from the last `latest_feeling_lookback_days` are read, so a
        member silent for longer has no entry and is shown without a feeling.
        """
        try:
            query = self.supabase.table("feelings")\
                .select("*")\
                .eq("group_id", group_id)
            if member_ids is not None:
                if not member_ids:
                    return {}
                query = query.in_("user_id", member_ids)
            since = (utcnow() - timedelta(days=settings.latest_feeling_lookback_days)).isoformat()
            result = query.gte("created_at", since)\
                .order("created_at", desc=True)\
                .execute()
            latest: Dict[str, dict] = {}
            for row in result.data or []:
                latest.setdefault(row["user_id"], row)
            return latest
        except Exception as e:
            raise to_http_exception(e)

    def history(
        self,
        group_id: str,
        viewer_id: str,
        days: int = 14,
        user_id: Optional[str] = None,
        limit: int = 200
    ) -> List[FeelingResponse]:
        """Feelings from the last `days` local days of the viewer, today included, newest first"""
        if not 1 <= days <= 90:
            raise HTTPException(status_code=400, detail="days must be between 1 and 90")
        try:
            since = (self.today_for(viewer_id) - timedelta(days=days - 1)).isoformat()
            query = self.supabase.table("feelings")\
                .select("*")\
                .eq("group_id", group_id)\
                .gte("feeling_date", since)
            if user_id:
                query = query.eq("user_id", user_id)
            result = query.order("created_at", desc=True).limit(limit).execute()
            return [to_response(row) for row in result.data or []]
        except Exception as e:
            raise to_http_exception(e)

    def has_logged_today(self, user_id: str, day: date) -> bool:
        """True when the user shared a feeling in any group on `day`"""
        result = self.supabase.table("feelings")\
            .select("id")\
            .eq("user_id", user_id)\
            .eq("feeling_date", day.isoformat())\
            .limit(1)\
            .execute()
        return bool(result.data)
