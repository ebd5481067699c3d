"""Pomodoro preferences/sessions and reminder CRUD."""
from conftest import auth


async def test_pomodoro_defaults_and_update(client, make_user):
    _, token = await make_user()

    defaults = (await client.get("/api/pomodoro/settings", headers=auth(token))).json()
    assert defaults == {
        "focus_minutes": 25,
        "short_break_minutes": 5,
        "long_break_minutes": 15,
        "cycles_before_long": 4,
        "auto_start_breaks": False,
        "auto_start_focus": False,
    }

    updated = await client.put(
        "/api/pomodoro/settings", json={"focus_minutes": 50, "auto_start_breaks": True}, headers=auth(token)
    )
    assert updated.json()["focus_minutes"] == 50
    assert updated.json()["short_break_minutes"] == 5
    assert (await client.get("/api/pomodoro/settings", headers=auth(token))).json()["auto_start_breaks"] is True

    invalid = await client.put("/api/pomodoro/settings", json={"focus_minutes": 0}, headers=auth(token))
    assert invalid.status_code == 400


async def test_pomodoro_session_log(client, make_user):
    _, token = await make_user()

    logged = await client.post(
        "/api/pomodoro/sessions",
        json={"type": "focus", "planned_minutes": 25, "completed": True},
        headers=auth(token),
    )
    assert logged.status_code == 200
    assert logged.json()["completed"] is True
    assert logged.json()["started_at"]

    missing = await client.post("/api/pomodoro/sessions", json={"type": "focus"}, headers=auth(token))
    assert missing.status_code == 400


async def test_reminder_crud_and_ordering(client, make_user):
    _, token = await make_user()

    later = await client.post(
        "/api/reminders", json={"title": "Stretch", "remind_at": "2026-03-10T10:00:00"}, headers=auth(token)
    )
    sooner = await client.post(
        "/api/reminders", json={"title": "Water", "remind_at": "2026-03-10T09:00:00"}, headers=auth(token)
    )
    earliest = await client.post(
        "/api/reminders", json={"title": "Vitamins", "remind_at": "2026-03-10T08:00:00"}, headers=auth(token)
    )
    assert later.status_code == 200

    done = await client.put(f"/api/reminders/{earliest.json()['id']}", json={"is_done": True}, headers=auth(token))
    assert done.json()["is_done"] is True
    assert done.json()["title"] == "Vitamins"

    listed = (await client.get("/api/reminders", headers=auth(token))).json()
    assert [r["title"] for r in listed] == ["Water", "Stretch", "Vitamins"]

    renamed = await client.put(
        f"/api/reminders/{sooner.json()['id']}", json={"title": "Drink water", "note": "500ml"}, headers=auth(token)
    )
    assert renamed.json()["title"] == "Drink water"
    assert renamed.json()["note"] == "500ml"

    deleted = await client.delete(f"/api/reminders/{later.json()['id']}", headers=auth(token))
    assert deleted.json() == {"ok": True}
    assert len((await client.get("/api/reminders", headers=auth(token))).json()) == 2


async def test_reminder_validation_and_ownership(client, make_user):
    _, owner_token = await make_user()
    _, other_token = await make_user()

    assert (await client.post("/api/reminders", json={"title": "  "}, headers=auth(owner_token))).status_code == 400
    reminder = (await client.post("/api/reminders", json={"title": "Call mom"}, headers=auth(owner_token))).json()

    blank = await client.put(f"/api/reminders/{reminder['id']}", json={"title": ""}, headers=auth(owner_token))
    foreign_update = await client.put(f"/api/reminders/{reminder['id']}", json={"is_done": True}, headers=auth(other_token))
    foreign_delete = await client.delete(f"/api/reminders/{reminder['id']}", headers=auth(other_token))

    assert blank.status_code == 400
    assert foreign_update.status_code == 404
    assert foreign_delete.status_code == 404
    assert (await client.get("/api/reminders", headers=auth(other_token))).json() == []
