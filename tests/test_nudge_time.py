import random
from datetime import date, datetime, timezone

import pytest

from app.core.clock import parse_hhmm
from app.modules.notifications.nudge_time import candidate_minutes, pick_nudge_time, quiet_minutes

DAY = date(2026, 10, 19)


def test_parse_hhmm():
    assert parse_hhmm("10:30") == 630
    assert parse_hhmm("24:00") == 1440
    with pytest.raises(ValueError):
        parse_hhmm("25:00")


def test_picked_time_is_inside_window_in_utc():
    rng = random.Random(7)
    for _ in range(200):
        at = pick_nudge_time(DAY, "UTC", "10:00", "20:00", rng=rng)
        assert at.tzinfo == timezone.utc
        assert at.date() == DAY
        assert 10 <= at.hour < 20


def test_timezone_is_converted_to_utc():
    at = pick_nudge_time(DAY, "America/New_York", "10:00", "10:01", rng=random.Random(1))
    # 10:00 EDT
    assert at == datetime(2026, 10, 19, 14, 0, tzinfo=timezone.utc)


def test_quiet_hours_are_excluded():
    minutes = candidate_minutes("10:00", "20:00", "12:00", "19:00")
    assert min(minutes) == 600
    assert all(m < 720 or m >= 1140 for m in minutes)
    assert len(minutes) == 120 + 60


def test_quiet_hours_can_wrap_midnight():
    blocked = quiet_minutes("22:00", "11:00")
    assert 23 * 60 in blocked
    assert 30 in blocked
    assert 10 * 60 + 59 in blocked
    assert 11 * 60 not in blocked
    assert min(candidate_minutes("10:00", "20:00", "22:00", "11:00")) == 660


def test_quiet_hours_covering_window_returns_none():
    assert pick_nudge_time(DAY, "UTC", "10:00", "20:00", "09:00", "21:00") is None


def test_not_before_skips_past_minutes_today():
    now = datetime(2026, 10, 19, 19, 58, tzinfo=timezone.utc)
    at = pick_nudge_time(DAY, "UTC", "10:00", "20:00", rng=random.Random(3), not_before=now)
    assert at == datetime(2026, 10, 19, 19, 59, tzinfo=timezone.utc)
    late = datetime(2026, 10, 19, 21, 0, tzinfo=timezone.utc)
    assert pick_nudge_time(DAY, "UTC", "10:00", "20:00", not_before=late) is None


def test_window_must_be_ordered():
    with pytest.raises(ValueError):
        candidate_minutes("20:00", "10:00")
