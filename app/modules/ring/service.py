from datetime import date, datetime, timedelta
from typing import Optional, Union
from supabase import Client
from app.config import settings
from app.core.clock import parse_timestamp, utcnow
from app.modules.feelings.service import FeelingService
from app.modules.groups.service import GroupService
from app.modules.ring import layout as ring_layout
from app.modules.ring.schemas import RingResponse, RingSliceResponse


def _as_date(value: Union[str, date, None]) -> Optional[date]:
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


class RingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.groups = GroupService(supabase)
        self.feelings = FeelingService(supabase)

    def build(
        self,
        group_id: str,
        viewer_id: str,
        today_only: bool = False,
        size: float = 200,
        now: Optional[datetime] = None
    ) -> ring_layout.RingLayout:
        now = now or utcnow()
        members = self.groups.list_members(group_id)[:ring_layout.SLICE_COUNT]
        latest = self.feelings.latest_by_member(group_id, [m.user_id for m in members])

        ring_members = []
        for m in members:
            row = latest.get(m.user_id)
            ring_members.append(ring_layout.RingMember(
                user_id=m.user_id,
                display_name=m.display_name,
                avatar_url=m.avatar_url,
                feeling_id=row["id"] if row else None,
                color=row["color"] if row else None,
                word=row["word"] if row else None,
                feeling_date=_as_date(row.get("feeling_date")) if row else None,
                created_at=parse_timestamp(row["created_at"]) if row else None
            ))

        today = self.feelings.today_for(viewer_id, now) if today_only else None
        return ring_layout.build_layout(
            ring_members,
            now=now,
            stale_after=timedelta(hours=settings.ring_stale_hours),
            today=today,
            size=size
        )

    def get_ring(self, group_id: str, viewer_id: str, today_only: bool = False, size: float = 200) -> RingResponse:
        group = self.groups.get_group_by_id(group_id)
        layout = self.build(group_id, viewer_id, today_only=today_only, size=size)
        return RingResponse(
            group_id=group.id,
            group_name=group.name,
            group_emoji=group.emoji,
            size=layout.size,
            center=layout.center,
            outer_radius=layout.outer_radius,
            inner_radius=layout.inner_radius,
            filled=layout.filled,
            fresh=layout.fresh,
            slices=[RingSliceResponse.model_validate(s) for s in layout.slices]
        )

    def get_ring_svg(self, group_id: str, viewer_id: str, today_only: bool = False, size: float = 200) -> str:
        self.groups.get_group_by_id(group_id)
        return ring_layout.render_svg(self.build(group_id, viewer_id, today_only=today_only, size=size))
