from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=40)
    avatar_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("display_name cannot be blank")
        return v


class ProfileResponse(BaseModel):
    id: str
    phone: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileWithGroupsResponse(ProfileResponse):
    groups: List[dict] = []
