from datetime import date, datetime, timedelta, timezone

from app.modules.feelings.palette import COLOR_HEX, EMPTY_HEX, FeelingColor
from app.modules.ring import layout
from app.modules.ring.layout import RingMember, build_layout, render_svg, slice_angles, slice_path

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)
DAY = timedelta(hours=24)


def member(user_id, color="yellow", word="happy", age=timedelta(hours=1), name=None):
    created = NOW - age
    return RingMember(
        user_id=user_id,
        display_name=name or user_id,
        feeling_id=f"f-{user_id}",
        color=color,
        word=word,
        feeling_date=created.date(),
        created_at=created,
    )


def test_six_slices_of_sixty_degrees_starting_at_twelve():
    assert slice_angles(0) == (-90, -30)
    assert slice_angles(5) == (210, 270)
    ring = build_layout([], NOW, DAY)
    assert len(ring.slices) == 6
    for s in ring.slices:
        assert s.end_angle - s.start_angle == 60


def test_slice_path_geometry():
    d = slice_path(0, 100, 100, 100, 60)
    assert d == "M 100 0 A 100 100 0 0 1 186.6 50 L 151.96 70 A 60 60 0 0 0 100 40 Z"


def test_pie_slice_without_inner_radius():
    d = slice_path(0, 100, 100, 100)
    assert d.startswith("M 100 100 L 100 0 A 100 100 0 0 1 186.6 50")
    assert d.endswith("Z")


def test_members_fill_slices_in_order_and_rest_are_empty():
    ring = build_layout([member("a", "red"), member("b", "blue")], NOW, DAY)
    assert [s.member_id for s in ring.slices] == ["a", "b", None, None, None, None]
    assert ring.slices[0].hex == COLOR_HEX[FeelingColor.RED]
    assert ring.slices[2].empty
    assert ring.slices[2].hex == EMPTY_HEX
    assert ring.filled == 2
    assert ring.fresh == 2


def test_old_feeling_is_stale():
    ring = build_layout([member("a", age=timedelta(hours=30))], NOW, DAY)
    s = ring.slices[0]
    assert s.stale
    assert s.opacity == layout.STALE_OPACITY
    assert s.pattern == "hatched"
    assert s.word == "happy"


def test_member_without_feeling_is_stale_and_grey():
    ring = build_layout([RingMember(user_id="a", display_name="A")], NOW, DAY)
    s = ring.slices[0]
    assert not s.empty
    assert s.stale
    assert s.hex == EMPTY_HEX
    assert s.feeling_id is None


def test_today_only_marks_yesterday_stale_even_if_recent():
    yesterday = member("a", age=timedelta(hours=2))
    yesterday.feeling_date = date(2026, 10, 18)
    ring = build_layout([yesterday, member("b")], NOW, DAY, today=date(2026, 10, 19))
    assert ring.slices[0].stale
    assert not ring.slices[1].stale


def test_only_six_members_are_drawn():
    members = [member(str(i)) for i in range(8)]
    ring = build_layout(members, NOW, DAY)
    assert [s.member_id for s in ring.slices] == ["0", "1", "2", "3", "4", "5"]


def test_render_svg_contains_every_slice_and_escapes_names():
    ring = build_layout([member("a", name="<Ann>", age=timedelta(hours=40))], NOW, DAY, size=120)
    svg = render_svg(ring)
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="120" height="120"')
    assert svg.count("data-slice=") == 6
    assert "&lt;Ann&gt;: happy" in svg
    assert 'fill="url(#stale)"' in svg
    assert svg.endswith("</svg>")
