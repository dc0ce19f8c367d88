from urllib.parse import unquote


def _compose(client, **body):
    return client.post("/api/v1/support/compose", json=body)


def test_templates_listing_hides_invite(client, alice):
    resp = client.get("/api/v1/support/templates")
    assert resp.status_code == 200
    keys = {t["key"] for t in resp.json()}
    assert "invite" not in keys
    assert {"sad", "tired", "default"} <= keys
    tired = next(t for t in resp.json() if t["key"] == "tired")
    assert "exhausted" in tired["keywords"]


def test_compose_uses_latest_feeling(client, db, alice, bob):
    group_id = db.add_group(alice, members=[bob])
    db.add_feeling(group_id, bob, color="gray", word="Exhausted")

    resp = _compose(client, group_id=group_id, recipient_id=bob)
    assert resp.status_code == 200, resp.text
    payload = resp.json()
    assert payload["template_key"] == "tired"
    assert payload["recipient_phone"] == "+15550000002"
    assert payload["body"] == (
        "Bob, sounds like a Exhausted day. Be easy on yourself, you've earned a rest. - Alice"
    )
    assert payload["sms_uri"].startswith("sms:+15550000002?&body=")
    assert unquote(payload["sms_uri"].split("body=", 1)[1]) == payload["body"]

    sent = client.get("/api/v1/support/sent").json()
    assert len(sent) == 1
    assert sent[0]["recipient_id"] == bob
    assert sent[0]["template_key"] == "tired"


def test_compose_without_feeling_uses_default(client, db, alice, bob):
    group_id = db.add_group(alice, members=[bob])
    payload = _compose(client, group_id=group_id, recipient_id=bob).json()
    assert payload["template_key"] == "default"
    assert payload["body"] == (
        "Hey Bob, just checking in on you. Saw you're feeling some kind of way today 🌈 - Alice"
    )


def test_compose_with_explicit_template(client, db, alice, bob):
    group_id = db.add_group(alice, members=[bob])
    payload = _compose(client, group_id=group_id, recipient_id=bob, template_key="sick").json()
    assert payload["template_key"] == "sick"
    assert payload["body"].startswith("Feel better soon, Bob!")

    assert _compose(client, group_id=group_id, recipient_id=bob, template_key="nope").status_code == 400
    assert _compose(client, group_id=group_id, recipient_id=bob, template_key="invite").status_code == 400


def test_compose_rejections(client, db, alice, bob):
    carol = db.add_user(display_name="Carol")
    group_id = db.add_group(alice, members=[bob])

    assert _compose(client, group_id=group_id, recipient_id=alice).status_code == 400
    assert _compose(client, group_id=group_id, recipient_id=carol).status_code == 404

    for row in db.tables["profiles"]:
        if row["id"] == bob:
            row["phone"] = None
    resp = _compose(client, group_id=group_id, recipient_id=bob)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Recipient has no phone number"


def test_compose_requires_membership(client, db, alice, bob):
    carol = db.add_user(display_name="Carol")
    group_id = db.add_group(bob, members=[carol])
    assert _compose(client, group_id=group_id, recipient_id=carol).status_code == 403
