from conftest import register


async def create_form(client, owner, **overrides):
    body = {"title": "Customer love", "description": "Tell us", "require_approval": True, "allow_video": False}
    body.update(overrides)
    resp = await client.post("/api/forms/", json=body, headers=owner["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


async def add_field(client, owner, form_id, **body):
    resp = await client.post(f"/api/forms/{form_id}/fields", json=body, headers=owner["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


def payload(**overrides):
    body = {"name": "Grace", "email": "grace@example.com", "content": "Loved it", "rating": 5}
    body.update(overrides)
    return body


# ─── Auth ─────────────────────────────────────────────────────────────────────

async def test_session_lifecycle(client):
    anonymous = await client.get("/api/auth/session")
    assert anonymous.json() == {"user": None}

    owner = await register(client)
    session = await client.get("/api/auth/session", headers=owner["headers"])
    assert session.json()["user"]["email"] == "owner@example.com"

    logout = await client.post("/api/auth/logout", headers=owner["headers"])
    assert logout.status_code == 204

    revoked = await client.get("/api/forms/", headers=owner["headers"])
    assert revoked.status_code == 401
    assert (await client.get("/api/auth/session", headers=owner["headers"])).json() == {"user": None}


async def test_login_and_bad_password(client):
    await register(client, email="a@example.com", password="secret123")

    ok = await client.post("/api/auth/login", json={"email": "A@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"

    bad = await client.post("/api/auth/login", json={"email": "a@example.com", "password": "wrong"})
    assert bad.status_code == 401


async def test_duplicate_registration(client):
    await register(client)
    resp = await client.post("/api/auth/register", json={
        "email": "owner@example.com", "password": "secret123", "full_name": "Again",
    })
    assert resp.status_code == 409


async def test_login_publishes_session_event(client):
    from praisewall.main import app

    seen = []
    unsubscribe = app.state.session_events.subscribe(seen.append)
    try:
        await register(client, email="events@example.com")
        await client.post("/api/auth/login", json={"email": "events@example.com", "password": "secret123"})
    finally:
        unsubscribe()

    assert [e.kind.value for e in seen] == ["registered", "login"]


async def test_owner_routes_need_a_session(client):
    assert (await client.get("/api/forms/")).status_code in (401, 403)
    bad = await client.get("/api/wall/", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401


# ─── Forms and fields ─────────────────────────────────────────────────────────

async def test_form_uses_saved_branding_and_share_url(client, owner):
    saved = await client.put("/api/settings/", json={
        "company_name": "Acme", "brand_color": "#112233", "email_notifications": False,
    }, headers=owner["headers"])
    assert saved.status_code == 200

    form = await create_form(client, owner)

    assert form["company_name"] == "Acme"
    assert form["brand_color"] == "#112233"
    assert form["is_active"] is True
    assert form["share_url"] == f"http://app.test/form/{form['_id']}"

    listed = await client.get("/api/forms/", headers=owner["headers"])
    assert [f["_id"] for f in listed.json()] == [form["_id"]]


async def test_forms_are_private_to_their_owner(client, owner):
    form = await create_form(client, owner)
    other = await register(client, email="other@example.com")

    resp = await client.get(f"/api/forms/{form['_id']}", headers=other["headers"])
    assert resp.status_code == 404
    assert (await client.get("/api/forms/", headers=other["headers"])).json() == []


async def test_null_title_in_form_update_keeps_stored_title(client, owner):
    form = await create_form(client, owner)

    resp = await client.put(f"/api/forms/{form['_id']}", json={"title": None}, headers=owner["headers"])
    assert resp.status_code == 400

    fetched = await client.get(f"/api/forms/{form['_id']}", headers=owner["headers"])
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Customer love"
    assert (await client.get(f"/api/public/forms/{form['_id']}")).status_code == 200


async def test_null_flags_in_form_update_keep_moderation_on(client, owner):
    form = await create_form(client, owner)

    resp = await client.put(
        f"/api/forms/{form['_id']}",
        json={"require_approval": None, "is_active": None, "description": "Updated"},
        headers=owner["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["require_approval"] is True
    assert resp.json()["is_active"] is True
    assert resp.json()["description"] == "Updated"

    submitted = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload())
    assert submitted.json()["status"] == "pending"


async def test_field_builder_flow(client, owner):
    form = await create_form(client, owner)
    form_id = form["_id"]
    a = await add_field(client, owner, form_id, label="Role")
    b = await add_field(client, owner, form_id, label="Plan", field_type="select", options=["Free", "Pro"])
    c = await add_field(client, owner, form_id, label="Score", field_type="rating", required=True)
    assert [a["order_index"], b["order_index"], c["order_index"]] == [0, 1, 2]

    blank = await client.post(f"/api/forms/{form_id}/fields", json={"label": " "}, headers=owner["headers"])
    assert blank.status_code == 400

    edited = await client.put(
        f"/api/forms/{form_id}/fields/{b['_id']}", json={"options": ["Team"]}, headers=owner["headers"]
    )
    assert edited.json()["options"] == ["Team"]
    assert edited.json()["order_index"] == 1

    moved = await client.post(
        f"/api/forms/{form_id}/fields/{c['_id']}/move", json={"direction": "up"}, headers=owner["headers"]
    )
    body = moved.json()
    assert body["moved"] is True
    assert [f["label"] for f in body["fields"]] == ["Role", "Score", "Plan"]
    assert [f["order_index"] for f in body["fields"]] == [0, 1, 2]

    stuck = await client.post(
        f"/api/forms/{form_id}/fields/{a['_id']}/move", json={"direction": "up"}, headers=owner["headers"]
    )
    assert stuck.status_code == 200
    assert stuck.json() == {**stuck.json(), "moved": False, "reason": "at_boundary"}

    deleted = await client.delete(f"/api/forms/{form_id}/fields/{a['_id']}", headers=owner["headers"])
    assert deleted.status_code == 204
    remaining = await client.get(f"/api/forms/{form_id}/fields", headers=owner["headers"])
    assert [f["order_index"] for f in remaining.json()] == [1, 2]


# ─── Public form ──────────────────────────────────────────────────────────────

async def test_public_form_renders_widgets(client, owner):
    form = await create_form(client, owner, questions=["What did you like?"])
    await add_field(client, owner, form["_id"], label="Role", placeholder="CTO")
    await add_field(client, owner, form["_id"], label="Features", field_type="checkbox", options=["A", "B"])

    resp = await client.get(f"/api/public/forms/{form['_id']}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["questions"] == ["What did you like?"]
    assert [w["input"] for w in body["fields"]] == ["text", "checkbox_group"]
    assert body["fields"][0]["placeholder"] == "CTO"


async def test_unknown_or_inactive_form_is_not_found(client, owner):
    assert (await client.get("/api/public/forms/000000000000000000000000")).status_code == 404
    assert (await client.get("/api/public/forms/garbage")).status_code == 404

    form = await create_form(client, owner)
    await client.put(f"/api/forms/{form['_id']}", json={"is_active": False}, headers=owner["headers"])
    resp = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload())
    assert resp.status_code == 404


async def test_submit_reports_first_missing_field(client, owner):
    form = await create_form(client, owner)
    await add_field(client, owner, form["_id"], label="Job title", required=True)

    resp = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload())

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Job title is required"
    listed = await client.get("/api/testimonials/", headers=owner["headers"])
    assert listed.json()["total"] == 0


async def test_submit_status_follows_moderation_policy(client, owner):
    moderated = await create_form(client, owner)
    instant = await create_form(client, owner, require_approval=False)

    pending = await client.post(f"/api/public/forms/{moderated['_id']}/submit", json=payload())
    approved = await client.post(f"/api/public/forms/{instant['_id']}/submit", json=payload())

    assert pending.status_code == 201
    assert pending.json()["status"] == "pending"
    assert "reviewed" in pending.json()["message"]
    assert approved.json()["status"] == "approved"


async def test_rating_outside_range_is_rejected_with_one_message(client, owner):
    form = await create_form(client, owner)
    for rating in (0, 7):
        resp = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload(rating=rating))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Rating must be between 1 and 5"

    listed = await client.get("/api/testimonials/", headers=owner["headers"])
    assert listed.json()["total"] == 0


async def test_media_upload(client, owner):
    form = await create_form(client, owner)

    image = await client.post(
        f"/api/public/forms/{form['_id']}/uploads",
        params={"kind": "image"},
        files={"file": ("me.png", b"\x89PNG", "image/png")},
    )
    assert image.status_code == 201
    assert image.json()["public_url"].startswith("http://media.test/uploads/testimonials/images/")

    video = await client.post(
        f"/api/public/forms/{form['_id']}/uploads",
        params={"kind": "video"},
        files={"file": ("me.mp4", b"0000", "video/mp4")},
    )
    assert video.status_code == 400

    submitted = await client.post(
        f"/api/public/forms/{form['_id']}/submit",
        json=payload(image_url=image.json()["public_url"]),
    )
    assert submitted.status_code == 201


# ─── Moderation, wall, analytics ──────────────────────────────────────────────

async def test_moderation_and_wall(client, owner):
    form = await create_form(client, owner)
    ids = []
    for name in ("First", "Second"):
        resp = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload(name=name))
        ids.append(resp.json()["id"])

    assert (await client.get("/api/wall/", headers=owner["headers"])).json() == []

    approve = await client.patch(f"/api/testimonials/{ids[0]}/approve", headers=owner["headers"])
    assert approve.json()["status"] == "approved"
    reject = await client.patch(f"/api/testimonials/{ids[1]}/reject", headers=owner["headers"])
    assert reject.json()["status"] == "rejected"

    again = await client.patch(f"/api/testimonials/{ids[1]}/approve", headers=owner["headers"])
    assert again.status_code == 409

    wall = (await client.get("/api/wall/", headers=owner["headers"])).json()
    assert [t["name"] for t in wall] == ["First"]
    assert all(t["status"] == "approved" for t in wall)

    public_wall = (await client.get(f"/api/public/wall/{owner['id']}")).json()
    assert [t["name"] for t in public_wall] == ["First"]
    assert "email" not in public_wall[0]

    rejected = await client.get("/api/testimonials/", params={"status": "rejected"}, headers=owner["headers"])
    assert [t["_id"] for t in rejected.json()["testimonials"]] == [ids[1]]

    bad_filter = await client.get("/api/testimonials/", params={"status": "spam"}, headers=owner["headers"])
    assert bad_filter.status_code == 400


async def test_testimonial_listing_pages(client, owner):
    form = await create_form(client, owner)
    for name in ("One", "Two", "Three"):
        await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload(name=name))

    page = await client.get("/api/testimonials/", params={"skip": 1, "limit": 1}, headers=owner["headers"])

    assert page.json()["total"] == 3
    assert len(page.json()["testimonials"]) == 1


async def test_other_accounts_cannot_moderate(client, owner):
    form = await create_form(client, owner)
    resp = await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload())
    other = await register(client, email="intruder@example.com")

    denied = await client.patch(f"/api/testimonials/{resp.json()['id']}/approve", headers=other["headers"])
    assert denied.status_code == 404


async def test_analytics_and_dashboard(client, owner):
    form = await create_form(client, owner, require_approval=False)
    for rating in (3, 5):
        await client.post(f"/api/public/forms/{form['_id']}/submit", json=payload(rating=rating))

    data = (await client.get("/api/analytics", headers=owner["headers"])).json()
    assert data["total_testimonials"] == 2
    assert data["approved_testimonials"] == 2
    assert data["average_rating"] == 4.0
    assert data["forms"][0]["total"] == 2

    dashboard = (await client.get("/api/dashboard", headers=owner["headers"])).json()
    assert dashboard["pending_approval"] == 0
    assert len(dashboard["recent"]) == 2


# ─── Settings ─────────────────────────────────────────────────────────────────

async def test_settings_defaults_then_lazy_create_and_update(client, owner):
    defaults = (await client.get("/api/settings/", headers=owner["headers"])).json()
    assert defaults["brand_color"] == "#4F46E5"
    assert defaults["email_notifications"] is True
    assert defaults["_id"] is None

    first = await client.put("/api/settings/", json={"company_name": "Acme"}, headers=owner["headers"])
    second = await client.put(
        "/api/settings/", json={"company_name": "Acme Inc", "email_notifications": False}, headers=owner["headers"]
    )

    assert first.json()["_id"] == second.json()["_id"]
    assert second.json()["company_name"] == "Acme Inc"
    assert second.json()["email_notifications"] is False

    invalid = await client.put("/api/settings/", json={"brand_color": "blue"}, headers=owner["headers"])
    assert invalid.status_code == 422


async def test_health_check(client):
    resp = await client.get("/status")
    assert resp.json()["status"] == "ok"
