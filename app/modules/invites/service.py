import secrets
from datetime import timedelta
from supabase import Client
from app.config import settings
from app.core.clock import parse_timestamp, utcnow
from app.core.errors import is_unique_violation, to_http_exception
from app.modules.groups.schemas import GroupMemberResponse
from app.modules.groups.service import GroupService
from app.modules.invites.schemas import (
    InviteCreate, InviteResponse, InviteCreatedResponse, InvitePreviewResponse,
    INVITE_PENDING, INVITE_ACCEPTED, INVITE_REVOKED
)
from app.modules.support import templates
from app.modules.support.schemas import SmsComposePayload
from app.modules.users.service import UserService
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# No 0/O or 1/I, codes are read aloud and typed by hand
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
_CODE_ATTEMPTS = 5


def generate_invite_code(length: Optional[int] = None) -> str:
    length = length or settings.invite_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def invite_link(code: str) -> str:
    return f"{settings.invite_base_url.rstrip('/')}/{code}"


class InviteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.groups = GroupService(supabase)
        self.users = UserService(supabase)

    def _get_by_code(self, code: str) -> dict:
        result = self.supabase.table("invites")\
            .select("*")\
            .eq("code", code.strip().upper())\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Invite not found")
        return result.data[0]

    @staticmethod
    def _is_expired(invite: dict) -> bool:
        expires_at = parse_timestamp(invite.get("expires_at"))
        return expires_at is not None and expires_at <= utcnow()

    def create_invite(self, group_id: str, inviter_id: str, invite_data: InviteCreate) -> InviteCreatedResponse:
        """Create a pending invite code, plus an SMS compose payload when a phone is given"""
        try:
            group = self.groups.get_group_by_id(group_id)
            if self.groups.is_full(group_id):
                raise HTTPException(status_code=409, detail="Group is full")

            expires_at = (utcnow() + timedelta(days=settings.invite_ttl_days)).isoformat()
            row = None
            for _ in range(_CODE_ATTEMPTS):
                try:
                    result = self.supabase.table("invites").insert({
                        "code": generate_invite_code(),
                        "group_id": group_id,
                        "inviter_id": inviter_id,
                        "phone": invite_data.phone,
                        "status": INVITE_PENDING,
                        "expires_at": expires_at
                    }).execute()
                except Exception as e:
                    if is_unique_violation(e):
                        logger.warning("Invite code collision, retrying")
                        continue
                    raise
                row = result.data[0] if result.data else None
                break

            if not row:
                raise HTTPException(status_code=500, detail="Failed to create invite")

            link = invite_link(row["code"])
            sms = None
            if invite_data.phone:
                inviter = self.users.get_profiles([inviter_id]).get(inviter_id)
                body = templates.render_message(
                    templates.TEMPLATES["invite"],
                    sender=(inviter.display_name if inviter else None) or "A friend",
                    group=f"{group.emoji} {group.name}",
                    link=link
                )
                sms = SmsComposePayload(
                    recipient_phone=invite_data.phone,
                    body=body,
                    sms_uri=templates.build_sms_uri(invite_data.phone, body),
                    template_key="invite"
                )

            logger.info(f"Invite {row['code']} created for group {group_id} by {inviter_id}")
            return InviteCreatedResponse(**row, link=link, sms=sms)
        except Exception as e:
            raise to_http_exception(e)

    def preview_invite(self, code: str) -> InvitePreviewResponse:
        """What the invitee sees before joining"""
        try:
            invite = self._get_by_code(code)
            if invite["status"] == INVITE_PENDING and self._is_expired(invite):
                raise HTTPException(status_code=410, detail="Invite has expired")

            group = self.groups.get_group_by_id(invite["group_id"])
            inviter = self.users.get_profiles([invite["inviter_id"]]).get(invite["inviter_id"])
            member_count = self.groups.count_members(group.id)
            return InvitePreviewResponse(
                code=invite["code"],
                status=invite["status"],
                group_id=group.id,
                group_name=group.name,
                group_emoji=group.emoji,
                inviter_name=inviter.display_name if inviter else None,
                member_count=member_count,
                is_full=member_count >= settings.max_group_members,
                expires_at=invite["expires_at"]
            )
        except Exception as e:
            raise to_http_exception(e)

    def accept_invite(self, code: str, user_id: str) -> GroupMemberResponse:
        """Join the invite's group and mark the invite accepted"""
        try:
            invite = self._get_by_code(code)
            if invite["status"] != INVITE_PENDING:
                raise HTTPException(status_code=409, detail=f"Invite is already {invite['status']}")
            if self._is_expired(invite):
                raise HTTPException(status_code=410, detail="Invite has expired")

            # Claim the invite before joining; only one concurrent accept matches pending
            claimed = self.supabase.table("invites")\
                .update({
                    "status": INVITE_ACCEPTED,
                    "accepted_by": user_id,
                    "accepted_at": utcnow().isoformat()
                })\
                .eq("id", invite["id"])\
                .eq("status", INVITE_PENDING)\
                .execute()
            if not claimed.data:
                raise HTTPException(status_code=409, detail="Invite is no longer pending")

            try:
                member = self.groups.add_member(invite["group_id"], user_id)
            except Exception:
                self.supabase.table("invites")\
                    .update({"status": INVITE_PENDING, "accepted_by": None, "accepted_at": None})\
                    .eq("id", invite["id"])\
                    .eq("accepted_by", user_id)\
                    .execute()
                raise

            logger.info(f"Invite {invite['code']} accepted by {user_id}")
            return member
        except Exception as e:
            raise to_http_exception(e)

    def list_group_invites(self, group_id: str, status: Optional[str] = None) -> List[InviteResponse]:
        try:
            query = self.supabase.table("invites")\
                .select("*")\
                .eq("group_id", group_id)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [InviteResponse(**row) for row in result.data or []]
        except Exception as e:
            raise to_http_exception(e)

    def revoke_invite(self, invite_id: str, user_id: str) -> InviteResponse:
        """Inviter or group owner revokes a pending invite"""
        try:
            result = self.supabase.table("invites")\
                .select("*")\
                .eq("id", invite_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Invite not found")
            invite = result.data[0]

            group = self.groups.get_group_by_id(invite["group_id"])
            if user_id not in (invite["inviter_id"], group.owner_id):
                raise HTTPException(status_code=403, detail="Only the inviter or group owner can revoke an invite")
            if invite["status"] != INVITE_PENDING:
                raise HTTPException(status_code=409, detail=f"Invite is already {invite['status']}")

            updated = self.supabase.table("invites")\
                .update({"status": INVITE_REVOKED})\
                .eq("id", invite_id)\
                .execute()
            return InviteResponse(**updated.data[0])
        except Exception as e:
            raise to_http_exception(e)
