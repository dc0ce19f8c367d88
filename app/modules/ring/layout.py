"""
Ring layout for a group's latest moods.

The circle is split into six fixed 60 degree slices. Slice 0 starts at
12 o'clock and slices run clockwise (SVG y axis points down, so increasing
angles are clockwise on screen). Members fill slices in join order.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from html import escape
from typing import List, Optional, Sequence

from app.modules.feelings.palette import EMPTY_HEX, color_hex

SLICE_COUNT = 6
SLICE_DEGREES = 360 / SLICE_COUNT
START_OFFSET_DEGREES = -90
FRESH_OPACITY = 1.0
STALE_OPACITY = 0.35


@dataclass
class RingMember:
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    feeling_id: Optional[str] = None
    color: Optional[str] = None
    word: Optional[str] = None
    feeling_date: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass
class RingSlice:
    index: int
    start_angle: float
    end_angle: float
    path: str
    empty: bool = True
    member_id: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    feeling_id: Optional[str] = None
    color: Optional[str] = None
    hex: str = EMPTY_HEX
    word: Optional[str] = None
    created_at: Optional[datetime] = None
    stale: bool = False
    opacity: float = FRESH_OPACITY
    pattern: str = "none"  # none | solid | hatched


@dataclass
class RingLayout:
    size: float
    center: float
    outer_radius: float
    inner_radius: float
    slices: List[RingSlice] = field(default_factory=list)

    @property
    def filled(self) -> int:
        return sum(1 for s in self.slices if not s.empty)

    @property
    def fresh(self) -> int:
        return sum(1 for s in self.slices if not s.empty and not s.stale)


def _fmt(value: float) -> str:
    value = round(value, 2)
    if value == 0:
        value = 0.0
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _point(cx: float, cy: float, radius: float, degrees: float):
    rad = math.radians(degrees)
    return cx + radius * math.cos(rad), cy + radius * math.sin(rad)


def slice_angles(index: int):
    start = index * SLICE_DEGREES + START_OFFSET_DEGREES
    return start, start + SLICE_DEGREES


def slice_path(index: int, cx: float, cy: float, outer_radius: float, inner_radius: float = 0) -> str:
    """SVG path data for one slice: outer arc clockwise, inner arc back."""
    start, end = slice_angles(index)
    ox1, oy1 = _point(cx, cy, outer_radius, start)
    ox2, oy2 = _point(cx, cy, outer_radius, end)
    R = _fmt(outer_radius)
    parts = []
    if inner_radius > 0:
        ix1, iy1 = _point(cx, cy, inner_radius, start)
        ix2, iy2 = _point(cx, cy, inner_radius, end)
        r = _fmt(inner_radius)
        parts.append(f"M {_fmt(ox1)} {_fmt(oy1)}")
        parts.append(f"A {R} {R} 0 0 1 {_fmt(ox2)} {_fmt(oy2)}")
        parts.append(f"L {_fmt(ix2)} {_fmt(iy2)}")
        parts.append(f"A {r} {r} 0 0 0 {_fmt(ix1)} {_fmt(iy1)}")
    else:
        parts.append(f"M {_fmt(cx)} {_fmt(cy)}")
        parts.append(f"L {_fmt(ox1)} {_fmt(oy1)}")
        parts.append(f"A {R} {R} 0 0 1 {_fmt(ox2)} {_fmt(oy2)}")
    parts.append("Z")
    return " ".join(parts)


def is_stale(
    member: RingMember,
    now: datetime,
    stale_after: timedelta,
    today: Optional[date] = None
) -> bool:
    """No feeling, a feeling older than stale_after, or (with today) not from today."""
    if not member.feeling_id or member.created_at is None:
        return True
    if today is not None:
        return member.feeling_date != today
    return now - member.created_at > stale_after


def build_layout(
    members: Sequence[RingMember],
    now: datetime,
    stale_after: timedelta,
    today: Optional[date] = None,
    size: float = 200,
    inner_ratio: float = 0.6
) -> RingLayout:
    """Place up to six members on the ring; the remaining slices are empty."""
    center = size / 2
    outer = center
    inner = outer * inner_ratio
    layout = RingLayout(size=size, center=center, outer_radius=outer, inner_radius=inner)

    for index in range(SLICE_COUNT):
        start, end = slice_angles(index)
        s = RingSlice(
            index=index,
            start_angle=start,
            end_angle=end,
            path=slice_path(index, center, center, outer, inner)
        )
        if index < len(members):
            member = members[index]
            stale = is_stale(member, now, stale_after, today)
            s.empty = False
            s.member_id = member.user_id
            s.display_name = member.display_name
            s.avatar_url = member.avatar_url
            s.stale = stale
            s.opacity = STALE_OPACITY if stale else FRESH_OPACITY
            s.pattern = "hatched" if stale else "solid"
            if member.feeling_id:
                s.feeling_id = member.feeling_id
                s.color = member.color
                s.hex = color_hex(member.color)
                s.word = member.word
                s.created_at = member.created_at
        layout.slices.append(s)
    return layout


def render_svg(layout: RingLayout) -> str:
    """Standalone SVG document for the ring."""
    size = _fmt(layout.size)
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 {size} {size}">',
        "<defs>",
        '<pattern id="stale" patternUnits="userSpaceOnUse" width="6" height="6" patternTransform="rotate(45)">',
        '<line x1="0" y1="0" x2="0" y2="6" stroke="#FFFFFF" stroke-width="2" stroke-opacity="0.6"/>',
        "</pattern>",
        "</defs>",
    ]
    for s in layout.slices:
        title = ""
        if not s.empty:
            label = s.display_name or "member"
            if s.word:
                label = f"{label}: {s.word}"
            title = f"<title>{escape(label)}</title>"
        lines.append(
            f'<path d="{s.path}" fill="{s.hex}" fill-opacity="{_fmt(s.opacity)}" '
            f'stroke="#FFFFFF" stroke-width="2" data-slice="{s.index}">{title}</path>'
        )
        if s.pattern == "hatched":
            lines.append(f'<path d="{s.path}" fill="url(#stale)" pointer-events="none"/>')
    lines.append("</svg>")
    return "\n".join(lines)
