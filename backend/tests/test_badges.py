"""Badge catalogue seeding and threshold-based unlocks."""
from datetime import date, timedelta

from app.domain.accounts.services import AuthService
from app.domain.badges.models import BadgeType, DEFAULT_BADGES
from app.domain.badges.services import BadgeService
from app.domain.habits.services import HabitService
from app.infra.db.repositories.badge_repo import BadgeRepository

from conftest import auth


async def _seed(session_factory):
    async with session_factory() as session:
        created = await BadgeService(session).seed_defaults()
        await session.commit()
    return created


async def test_seed_defaults_is_idempotent(session_factory):
    assert await _seed(session_factory) == len(DEFAULT_BADGES)
    assert await _seed(session_factory) == 0


async def test_fifth_habit_unlocks_starter_badge(client, make_user, session_factory):
    await _seed(session_factory)
    _, token = await make_user()

    for i in range(4):
        await client.post("/api/habits", json={"name": f"Habit {i}"}, headers=auth(token))
    before = {b["name"]: b["unlocked"] for b in (await client.get("/api/badges", headers=auth(token))).json()}
    assert before["The Starter"] is False

    await client.post("/api/habits", json={"name": "Habit 5"}, headers=auth(token))
    after = {b["name"]: b["unlocked"] for b in (await client.get("/api/badges", headers=auth(token))).json()}
    assert after["The Starter"] is True
    assert after["Habit Master"] is False

    achievements = await client.get("/api/notifications", params={"type": "ACHIEVEMENT"}, headers=auth(token))
    assert [n["content"] for n in achievements.json()] == ['Unlocked "The Starter" badge!']
    assert achievements.json()[0]["sender"] is None

    profile = (await client.get("/api/profile", headers=auth(token))).json()
    assert [b["name"] for b in profile["badges"]] == ["The Starter"]


async def test_streak_badge_and_no_double_award(db_session):
    user = await AuthService(db_session).signup("streak@example.com", "secret123", "Streaker", "streaker")
    await BadgeService(db_session).seed_defaults()
    await db_session.commit()

    start = date(2026, 3, 1)
    calendar = {"today": start}
    habits = HabitService(db_session, clock=lambda: calendar["today"])
    habit = await habits.create_habit(user.id, "Journal")
    for offset in range(7):
        calendar["today"] = start + timedelta(days=offset)
        await habits.update_habit(user.id, habit.id, completed_today=True)

    service = BadgeService(db_session, clock=lambda: start + timedelta(days=6))
    unlocked_ids = await BadgeRepository(db_session).unlocked_ids(user.id)
    on_fire = await BadgeRepository(db_session).get_by_name("On Fire")
    assert on_fire.id in unlocked_ids

    assert await service.evaluate(user.id, BadgeType.STREAK) == []
