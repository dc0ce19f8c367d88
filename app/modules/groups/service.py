from supabase import Client
from app.config import settings
from app.core.clock import utcnow
from app.core.errors import to_http_exception
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMemberResponse, GroupWithMembersResponse
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a new group with the creator as its first member"""
        try:
            result = self.supabase.table("groups").insert({
                "name": group_data.name,
                "emoji": group_data.emoji,
                "owner_id": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create group")

            self.supabase.table("group_members").insert({
                "group_id": result.data[0]["id"],
                "user_id": user_id
            }).execute()

            logger.info(f"Group {result.data[0]['id']} created by {user_id}")
            return GroupResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("id", group_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")

            return GroupResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Update group name or emoji"""
        try:
            update_data = {"updated_at": utcnow().isoformat()}
            if group_data.name is not None:
                update_data["name"] = group_data.name
            if group_data.emoji:
                update_data["emoji"] = group_data.emoji

            result = self.supabase.table("groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Group not found")

            return GroupResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e)

    def list_groups(self, user_id: str, limit: int = 10, offset: int = 0) -> List[GroupResponse]:
        """List groups the user is a member of, newest first"""
        try:
            members_result = self.supabase.table("group_members")\
                .select("group_id")\
                .eq("user_id", user_id)\
                .execute()
            if not members_result.data:
                return []
            group_ids = [m["group_id"] for m in members_result.data]
            result = self.supabase.table("groups")\
                .select("*")\
                .in_("id", group_ids)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [GroupResponse(**group) for group in result.data]
        except Exception as e:
            raise to_http_exception(e)

    def delete_group(self, group_id: str) -> bool:
        """Delete group together with its members, feelings and invites"""
        try:
            for table in ("feelings", "invites", "group_members"):
                self.supabase.table(table)\
                    .delete()\
                    .eq("group_id", group_id)\
                    .execute()

            result = self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()

            logger.info(f"Group {group_id} deleted")
            return len(result.data) > 0
        except Exception as e:
            raise to_http_exception(e)

    def count_members(self, group_id: str) -> int:
        result = self.supabase.table("group_members")\
            .select("id")\
            .eq("group_id", group_id)\
            .execute()
        return len(result.data or [])

    def is_full(self, group_id: str) -> bool:
        return self.count_members(group_id) >= settings.max_group_members

    def add_member(self, group_id: str, user_id: str) -> GroupMemberResponse:
        """Add a member; the group may hold at most max_group_members people"""
        try:
            self.get_group_by_id(group_id)

            existing = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Already a member of this group")

            if self.is_full(group_id):
                raise HTTPException(status_code=409, detail="Group is full")

            result = self.supabase.table("group_members").insert({
                "group_id": group_id,
                "user_id": user_id
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")

            logger.info(f"User {user_id} joined group {group_id}")
            return GroupMemberResponse(**result.data[0])
        except Exception as e:
            raise to_http_exception(e, conflict_detail="Already a member of this group")

    def remove_member(self, group_id: str, user_id: str, acting_user_id: str) -> bool:
        """Owner removes a member, or a member leaves. The owner cannot leave."""
        try:
            group = self.get_group_by_id(group_id)
            is_owner = group.owner_id == acting_user_id

            if user_id == group.owner_id:
                raise HTTPException(
                    status_code=400,
                    detail="The owner cannot leave the group; delete it instead"
                )
            if not is_owner and user_id != acting_user_id:
                raise HTTPException(
                    status_code=403,
                    detail="Only the group owner can remove other members"
                )

            result = self.supabase.table("group_members")\
                .delete()\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")
            return True
        except Exception as e:
            raise to_http_exception(e)

    def list_members(self, group_id: str, owner_id: Optional[str] = None) -> List[GroupMemberResponse]:
        """List group members in join order, with their profile fields"""
        try:
            result = self.supabase.table("group_members")\
                .select("*, profiles(display_name, avatar_url)")\
                .eq("group_id", group_id)\
                .order("created_at")\
                .execute()

            members = []
            for row in result.data or []:
                profile = row.pop("profiles", None) or {}
                members.append(GroupMemberResponse(
                    **row,
                    display_name=profile.get("display_name"),
                    avatar_url=profile.get("avatar_url"),
                    is_owner=row["user_id"] == owner_id
                ))
            return members
        except Exception as e:
            raise to_http_exception(e)

    def get_group_with_members(self, group_id: str) -> GroupWithMembersResponse:
        group = self.get_group_by_id(group_id)
        members = self.list_members(group_id, owner_id=group.owner_id)
        return GroupWithMembersResponse(
            **group.model_dump(),
            members=members,
            member_count=len(members),
            is_full=len(members) >= settings.max_group_members
        )
