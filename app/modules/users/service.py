from supabase import Client
from app.core.clock import utcnow
from app.modules.users.schemas import ProfileUpdate, ProfileResponse, ProfileWithGroupsResponse
from typing import List, Dict
from fastapi import HTTPException


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profiles(self, user_ids: List[str]) -> Dict[str, ProfileResponse]:
        """Get several profiles keyed by user id; missing ids are left out"""
        if not user_ids:
            return {}
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .in_("id", list(user_ids))\
                .execute()
            return {p["id"]: ProfileResponse(**p) for p in (result.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update user profile"""
        try:
            update_data = {"updated_at": utcnow().isoformat()}
            if profile_data.display_name is not None:
                update_data["display_name"] = profile_data.display_name
            if profile_data.avatar_url is not None:
                update_data["avatar_url"] = profile_data.avatar_url

            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_groups(self, user_id: str) -> List[dict]:
        """Get all groups for a user"""
        try:
            result = self.supabase.table("group_members")\
                .select("group_id, created_at, groups(*)")\
                .eq("user_id", user_id)\
                .execute()

            groups = []
            if result.data:
                for item in result.data:
                    if item.get("groups"):
                        group_data = item["groups"].copy()
                        group_data["joined_at"] = item.get("created_at")
                        groups.append(group_data)

            return groups
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile_with_groups(self, user_id: str) -> ProfileWithGroupsResponse:
        profile = self.get_profile(user_id)
        return ProfileWithGroupsResponse(**profile.model_dump(), groups=self.get_user_groups(user_id))
