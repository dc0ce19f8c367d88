from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime

from app.modules.feelings.palette import FeelingColor


def _clean_word(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("word cannot be blank")
    if any(ch.isspace() for ch in v):
        raise ValueError("word must be a single word")
    return v


class FeelingCreate(BaseModel):
    color: FeelingColor
    word: str = Field(min_length=1, max_length=24)
    reason: Optional[str] = Field(default=None, max_length=280)

    @field_validator("word")
    @classmethod
    def validate_word(cls, v: str) -> str:
        return _clean_word(v)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class FeelingUpdate(BaseModel):
    color: Optional[FeelingColor] = None
    word: Optional[str] = Field(default=None, min_length=1, max_length=24)
    reason: Optional[str] = Field(default=None, max_length=280)

    @field_validator("word")
    @classmethod
    def validate_word(cls, v: Optional[str]) -> Optional[str]:
        return _clean_word(v) if v is not None else v


class FeelingResponse(BaseModel):
    id: str
    group_id: str
    user_id: str
    color: FeelingColor
    word: str
    reason: Optional[str] = None
    feeling_date: date
    created_at: datetime
    updated_at: Optional[datetime] = None
    editable_until: Optional[datetime] = None
    is_editable: bool = False

    class Config:
        from_attributes = True


class GroupLogResult(BaseModel):
    group_id: str
    status: str  # created | already_logged
    feeling: Optional[FeelingResponse] = None


class FeelingEverywhereResponse(BaseModel):
    results: List[GroupLogResult]
    created: int
    already_logged: int
