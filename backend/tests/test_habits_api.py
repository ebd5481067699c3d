"""Habit routes and the analytics summary."""
from conftest import auth


async def test_habit_lifecycle_and_summary(client, make_user):
    _, token = await make_user()

    created = await client.post(
        "/api/habits", json={"name": "Read 20 pages", "scheduled_time": "21:00"}, headers=auth(token)
    )
    assert created.status_code == 200
    habit = created.json()
    assert habit["category"] == "General"
    assert habit["streak"] == 0

    done = await client.put(f"/api/habits/{habit['id']}", json={"completed_today": True}, headers=auth(token))
    assert done.json()["streak"] == 1
    assert done.json()["completed_today"] is True

    await client.post(
        "/api/habits/activity",
        json={"date": "2026-03-10", "completed_habits": [habit["id"]], "total_habits": 1, "completion_rate": 1.0},
        headers=auth(token),
    )
    summary = (await client.get("/api/analytics/summary", headers=auth(token))).json()
    assert summary["total_habits"] == 1
    assert summary["longest_streak"] == 1
    assert summary["completed_today"] == 1
    assert [a["date"] for a in summary["recent_activity"]] == ["2026-03-10"]

    deleted = await client.delete(f"/api/habits/{habit['id']}", headers=auth(token))
    assert deleted.json() == {"ok": True}
    assert (await client.get("/api/habits", headers=auth(token))).json() == []
    assert (await client.delete(f"/api/habits/{habit['id']}", headers=auth(token))).status_code == 404


async def test_habits_are_owner_scoped(client, make_user):
    _, owner_token = await make_user()
    _, other_token = await make_user()
    habit = (await client.post("/api/habits", json={"name": "Walk"}, headers=auth(owner_token))).json()

    update = await client.put(f"/api/habits/{habit['id']}", json={"completed_today": True}, headers=auth(other_token))
    assert update.status_code == 404
    assert (await client.get("/api/habits", headers=auth(other_token))).json() == []

    nameless = await client.post("/api/habits", json={"category": "Health"}, headers=auth(owner_token))
    bad_date = await client.post(
        "/api/habits/activity", json={"date": "March 10"}, headers=auth(owner_token)
    )
    assert nameless.status_code == 400
    assert bad_date.status_code == 400


async def test_completion_date_must_be_near_today(client, make_user):
    _, token = await make_user()
    habit = (await client.post("/api/habits", json={"name": "Floss"}, headers=auth(token))).json()

    for day in ("2099-01-01", "2099-01-02", "2020-01-01"):
        resp = await client.put(
            f"/api/habits/{habit['id']}", json={"completed_today": True, "date": day}, headers=auth(token)
        )
        assert resp.status_code == 400

    [stored] = (await client.get("/api/habits", headers=auth(token))).json()
    assert stored["streak"] == 0
    assert stored["last_completed_date"] is None
