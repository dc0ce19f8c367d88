from datetime import datetime, timedelta, timezone

from app.modules.feelings.palette import COLOR_HEX, EMPTY_HEX, FeelingColor


def _seed(db, alice, bob):
    carol = db.add_user(display_name="Tom & Jerry")
    group_id = db.add_group(alice, name="Crew", emoji="🫶", members=[bob, carol])
    now = datetime.now(timezone.utc)
    db.add_feeling(group_id, alice, color="yellow", word="sunny", created_at=now)
    db.add_feeling(group_id, bob, color="blue", word="down", created_at=now - timedelta(hours=30))
    return group_id, carol


def test_ring_json(client, db, alice, bob):
    group_id, carol = _seed(db, alice, bob)
    resp = client.get(f"/api/v1/groups/{group_id}/ring")
    assert resp.status_code == 200, resp.text
    ring = resp.json()

    assert ring["group_name"] == "Crew"
    assert ring["size"] == 200
    assert ring["filled"] == 3
    assert ring["fresh"] == 1
    assert [s["index"] for s in ring["slices"]] == [0, 1, 2, 3, 4, 5]
    assert [s["start_angle"] for s in ring["slices"]] == [-90, -30, 30, 90, 150, 210]

    first, second, third = ring["slices"][:3]
    assert first["member_id"] == alice
    assert first["hex"] == COLOR_HEX[FeelingColor.YELLOW]
    assert first["stale"] is False
    assert first["pattern"] == "solid"

    assert second["member_id"] == bob
    assert second["word"] == "down"
    assert second["stale"] is True
    assert second["opacity"] == 0.35

    assert third["member_id"] == carol
    assert third["color"] is None
    assert third["hex"] == EMPTY_HEX
    assert third["pattern"] == "hatched"

    for empty in ring["slices"][3:]:
        assert empty["empty"] is True
        assert empty["member_id"] is None
        assert empty["pattern"] == "none"


def test_ring_today_only(client, db, alice, bob):
    group_id, _ = _seed(db, alice, bob)
    db.add_feeling(group_id, bob, color="pink", word="loved",
                   feeling_date=(datetime.now(timezone.utc) - timedelta(days=1)).date())
    ring = client.get(f"/api/v1/groups/{group_id}/ring", params={"today_only": True}).json()
    # Bob's newest feeling was logged for yesterday
    assert ring["slices"][1]["word"] == "loved"
    assert ring["slices"][1]["stale"] is True
    assert ring["fresh"] == 1


def test_ring_svg(client, db, alice, bob):
    group_id, _ = _seed(db, alice, bob)
    resp = client.get(f"/api/v1/groups/{group_id}/ring.svg", params={"size": 100})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("image/svg+xml")
    svg = resp.text
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100"')
    assert svg.count("data-slice=") == 6
    assert svg.count('fill="url(#stale)"') == 2
    assert "<title>Alice: sunny</title>" in svg
    assert "<title>Tom &amp; Jerry</title>" in svg


def test_ring_requires_membership(client, db, alice, bob):
    group_id = db.add_group(bob)
    assert client.get(f"/api/v1/groups/{group_id}/ring").status_code == 403
    assert client.get(f"/api/v1/groups/{group_id}/ring.svg").status_code == 403
    assert client.get("/api/v1/groups/missing/ring").status_code == 404


def test_ring_size_bounds(client, db, alice):
    group_id = db.add_group(alice)
    assert client.get(f"/api/v1/groups/{group_id}/ring", params={"size": 0}).status_code == 422
    assert client.get(f"/api/v1/groups/{group_id}/ring", params={"size": 5000}).status_code == 422
