from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import date, datetime

from app.core.clock import is_valid_timezone, parse_hhmm

EXPO_TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")


class PushTokenRegister(BaseModel):
    token: str
    platform: str

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(EXPO_TOKEN_PREFIXES) or not v.endswith("]"):
            raise ValueError("Not an Expo push token")
        return v

    @field_validator("platform")
    @classmethod
    def validate_platform(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("ios", "android"):
            raise ValueError("platform must be ios or android")
        return v


class PushTokenResponse(BaseModel):
    id: str
    user_id: str
    token: str
    platform: str
    active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None


class NotificationSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    timezone: Optional[str] = None
    quiet_hours_start: Optional[str] = None
    quiet_hours_end: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_timezone(v):
            raise ValueError("Unknown timezone")
        return v

    @field_validator("quiet_hours_start", "quiet_hours_end")
    @classmethod
    def validate_hhmm(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        minutes = parse_hhmm(v)
        return f"{minutes // 60:02d}:{minutes % 60:02d}"

    @model_validator(mode="after")
    def quiet_hours_pair(self):
        fields = self.model_fields_set
        if ("quiet_hours_start" in fields) != ("quiet_hours_end" in fields):
            raise ValueError("quiet_hours_start and quiet_hours_end must be set together")
        if (self.quiet_hours_start is None) != (self.quiet_hours_end is None):
            raise ValueError("quiet_hours_start and quiet_hours_end must both be set or both be null")
        return self


class NotificationSettingsResponse(BaseModel):
    user_id: str
    enabled: bool = True
    timezone: str = "UTC"
    quiet_hours_start: Optional[str] = None
    quiet_hours_end: Optional[str] = None
    next_nudge_at: Optional[datetime] = None
    nudge_date: Optional[date] = None
    last_nudged_at: Optional[datetime] = None


class ScheduleResult(BaseModel):
    scheduled: int = 0
    skipped: int = 0
    unschedulable: int = 0


class SendResult(BaseModel):
    sent: int = 0
    skipped_logged: int = 0
    failed: int = 0
    no_tokens: int = 0
    deactivated_tokens: int = 0
