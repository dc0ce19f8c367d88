from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from app.core.phone import normalize_phone
from app.modules.support.schemas import SmsComposePayload

INVITE_PENDING = "pending"
INVITE_ACCEPTED = "accepted"
INVITE_REVOKED = "revoked"


class InviteCreate(BaseModel):
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone(v) if v else None


class InviteResponse(BaseModel):
    id: str
    code: str
    group_id: str
    inviter_id: str
    phone: Optional[str] = None
    status: str
    accepted_by: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InviteCreatedResponse(InviteResponse):
    link: str
    sms: Optional[SmsComposePayload] = None


class InvitePreviewResponse(BaseModel):
    code: str
    status: str
    group_id: str
    group_name: str
    group_emoji: str
    inviter_name: Optional[str] = None
    member_count: int
    is_full: bool
    expires_at: datetime
