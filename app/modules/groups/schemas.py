from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

DEFAULT_GROUP_EMOJI = "🌈"


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be blank")
    return v


class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    emoji: str = Field(default=DEFAULT_GROUP_EMOJI, min_length=1, max_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    emoji: Optional[str] = Field(default=None, min_length=1, max_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v) if v is not None else v


class GroupResponse(BaseModel):
    id: str
    name: str
    emoji: str = DEFAULT_GROUP_EMOJI
    owner_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupMemberResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    created_at: datetime
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_owner: bool = False

    class Config:
        from_attributes = True


class GroupWithMembersResponse(GroupResponse):
    members: List[GroupMemberResponse]
    member_count: int
    is_full: bool
