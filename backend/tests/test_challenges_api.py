"""Challenge join/leave and the habit and forum room that follow membership."""
from app.domain.challenges.services import ChallengeService

from conftest import auth


async def _seed_challenge(session_factory, name="75 Hard", duration=75):
    async with session_factory() as session:
        return await ChallengeService(session).create_challenge(name, "Two workouts a day.", duration)


async def test_join_creates_habit_and_forum_membership(client, make_user, session_factory):
    challenge = await _seed_challenge(session_factory)
    _, token = await make_user()

    joined = await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(token))
    assert joined.status_code == 200
    body = joined.json()
    assert body["joined"] is True
    assert body["participants"] == 1
    assert body["room_id"] == challenge.room_id

    habits = (await client.get("/api/habits", headers=auth(token))).json()
    assert [(h["id"], h["name"], h["category"]) for h in habits] == [(body["habit_id"], "75 Hard", "Challenge")]

    rooms = (await client.get("/api/chat/rooms", headers=auth(token))).json()
    assert [(r["id"], r["is_group"], r["name"]) for r in rooms] == [(challenge.room_id, True, "75 Hard Forum")]

    listed = (await client.get("/api/challenges", headers=auth(token))).json()
    assert listed[0]["joined"] is True
    assert listed[0]["habit_id"] == body["habit_id"]


async def test_join_twice_conflicts(client, make_user, session_factory):
    challenge = await _seed_challenge(session_factory)
    _, token = await make_user()

    await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(token))
    again = await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(token))

    assert again.status_code == 409
    listed = (await client.get("/api/challenges", headers=auth(token))).json()
    assert listed[0]["participants"] == 1
    assert len((await client.get("/api/habits", headers=auth(token))).json()) == 1


async def test_leave_undoes_join(client, make_user, session_factory):
    challenge = await _seed_challenge(session_factory)
    _, first_token = await make_user()
    _, second_token = await make_user()
    await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(first_token))
    await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(second_token))

    left = await client.post(f"/api/challenges/{challenge.id}/leave", headers=auth(first_token))
    assert left.status_code == 200
    assert left.json()["joined"] is False
    assert left.json()["habit_id"] is None
    assert left.json()["participants"] == 1

    assert (await client.get("/api/habits", headers=auth(first_token))).json() == []
    assert (await client.get("/api/chat/rooms", headers=auth(first_token))).json() == []
    forum = await client.get(f"/api/chat/rooms/{challenge.room_id}/messages", headers=auth(first_token))
    assert forum.status_code == 403


async def test_leave_without_joining_and_unknown_challenge(client, make_user, session_factory):
    challenge = await _seed_challenge(session_factory)
    _, token = await make_user()

    not_joined = await client.post(f"/api/challenges/{challenge.id}/leave", headers=auth(token))
    unknown = await client.post("/api/challenges/missing/join", headers=auth(token))

    assert not_joined.status_code == 400
    assert unknown.status_code == 404


async def test_forum_members_can_talk_without_friendship(client, make_user, session_factory):
    challenge = await _seed_challenge(session_factory, name="Dry January", duration=31)
    _, a_token = await make_user()
    b, b_token = await make_user()
    await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(a_token))
    await client.post(f"/api/challenges/{challenge.id}/join", headers=auth(b_token))

    sent = await client.post(
        f"/api/chat/rooms/{challenge.room_id}/messages", json={"content": "day 3, still going"}, headers=auth(b_token)
    )
    assert sent.status_code == 200
    history = (await client.get(f"/api/chat/rooms/{challenge.room_id}/messages", headers=auth(a_token))).json()
    assert [m["sender_id"] for m in history] == [b.id]
