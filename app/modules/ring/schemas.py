from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class RingSliceResponse(BaseModel):
    index: int
    start_angle: float
    end_angle: float
    path: str
    empty: bool
    member_id: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    feeling_id: Optional[str] = None
    color: Optional[str] = None
    hex: str
    word: Optional[str] = None
    created_at: Optional[datetime] = None
    stale: bool
    opacity: float
    pattern: str

    class Config:
        from_attributes = True


class RingResponse(BaseModel):
    group_id: str
    group_name: str
    group_emoji: str
    size: float
    center: float
    outer_radius: float
    inner_radius: float
    filled: int
    fresh: int
    slices: List[RingSliceResponse]
