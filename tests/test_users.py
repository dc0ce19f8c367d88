def test_my_profile_lists_groups(client, db, alice):
    group_id = db.add_group(alice, name="Crew")
    resp = client.get("/api/v1/users/me")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["display_name"] == "Alice"
    assert [g["id"] for g in body["groups"]] == [group_id]
    assert body["groups"][0]["joined_at"] is not None

    groups = client.get("/api/v1/users/me/groups").json()
    assert [g["name"] for g in groups] == ["Crew"]


def test_update_profile(client, db, alice):
    resp = client.put("/api/v1/users/me", json={"display_name": "  Ali  "})
    assert resp.status_code == 200, resp.text
    assert resp.json()["display_name"] == "Ali"
    assert resp.json()["updated_at"] is not None

    assert client.put("/api/v1/users/me", json={"display_name": "   "}).status_code == 422
    assert client.put("/api/v1/users/me", json={"display_name": "x" * 41}).status_code == 422


def test_profiles_visible_only_to_group_mates(client, db, alice, bob):
    carol = db.add_user(display_name="Carol")
    db.add_group(alice, members=[bob])

    assert client.get(f"/api/v1/users/{alice}").status_code == 200
    resp = client.get(f"/api/v1/users/{bob}")
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+15550000002"
    assert client.get(f"/api/v1/users/{carol}").status_code == 403
