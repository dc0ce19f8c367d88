"""Random time-of-day selection for the daily nudge."""

import random
from datetime import date, datetime, time, timezone
from typing import List, Optional

from app.core.clock import get_zone, parse_hhmm

MINUTES_PER_DAY = 24 * 60


def quiet_minutes(quiet_start: Optional[str], quiet_end: Optional[str]) -> set:
    """Minutes of the day covered by quiet hours; the range may wrap midnight."""
    if not quiet_start or not quiet_end:
        return set()
    qs, qe = parse_hhmm(quiet_start), parse_hhmm(quiet_end)
    if qs == qe:
        return set()
    if qs < qe:
        return set(range(qs, qe))
    return set(range(qs, MINUTES_PER_DAY)) | set(range(0, qe))


def candidate_minutes(
    window_start: str,
    window_end: str,
    quiet_start: Optional[str] = None,
    quiet_end: Optional[str] = None,
    not_before: Optional[int] = None
) -> List[int]:
    ws, we = parse_hhmm(window_start), parse_hhmm(window_end)
    if we <= ws:
        raise ValueError("Nudge window end must be after its start")
    blocked = quiet_minutes(quiet_start, quiet_end)
    lowest = max(ws, not_before) if not_before is not None else ws
    return [m for m in range(lowest, we) if m not in blocked]


def pick_nudge_time(
    day: date,
    tz_name: Optional[str],
    window_start: str,
    window_end: str,
    quiet_start: Optional[str] = None,
    quiet_end: Optional[str] = None,
    rng: Optional[random.Random] = None,
    not_before: Optional[datetime] = None
) -> Optional[datetime]:
    """Uniformly random minute of the local window on `day`, returned in UTC.

    Minutes inside quiet hours are excluded, as are minutes earlier than
    `not_before` when it falls on the same local day. Returns None when no
    minute is left.
    """
    rng = rng or random.Random()
    zone = get_zone(tz_name)
    floor = None
    if not_before is not None:
        local_now = not_before.astimezone(zone)
        if local_now.date() == day:
            floor = local_now.hour * 60 + local_now.minute + 1
        elif local_now.date() > day:
            return None

    minutes = candidate_minutes(window_start, window_end, quiet_start, quiet_end, floor)
    if not minutes:
        return None
    minute = rng.choice(minutes)
    local = datetime.combine(day, time(minute // 60, minute % 60), tzinfo=zone)
    return local.astimezone(timezone.utc)
