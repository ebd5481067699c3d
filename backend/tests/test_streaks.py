"""Streak rules and habit completion through HabitService."""
from datetime import date, datetime, timedelta

import pytest

from app.domain.accounts.services import AuthService
from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.habits.models import Habit
from app.domain.habits.services import HabitService
from app.domain.habits.streaks import apply_completion, current_streak

DAY = date(2026, 3, 10)


def _habit(streak=0, last=None, completed=False) -> Habit:
    now = datetime.utcnow()
    return Habit(
        id="h1",
        user_id="u1",
        name="Read",
        category="General",
        scheduled_time=None,
        streak=streak,
        completed_today=completed,
        last_completed_date=last,
        is_private=False,
        created_at=now,
        updated_at=now,
    )


def test_first_completion_starts_streak():
    habit = apply_completion(_habit(), True, DAY)
    assert habit.streak == 1
    assert habit.completed_today is True
    assert habit.last_completed_date == "2026-03-10"


def test_completion_grows_at_most_once_per_day():
    habit = _habit()
    for _ in range(3):
        apply_completion(habit, True, DAY)
        apply_completion(habit, False, DAY)
    apply_completion(habit, True, DAY)
    assert habit.streak == 1


def test_uncompleting_never_lowers_streak():
    habit = apply_completion(_habit(streak=4, last="2026-03-09"), True, DAY)
    assert habit.streak == 5
    apply_completion(habit, False, DAY)
    assert habit.streak == 5
    assert habit.completed_today is False


def test_consecutive_day_extends_and_gap_resets():
    habit = _habit(streak=2, last="2026-03-09")
    assert current_streak(habit, DAY) == 2
    apply_completion(habit, True, DAY)
    assert habit.streak == 3

    later = DAY + timedelta(days=3)
    assert current_streak(habit, later) == 0
    apply_completion(habit, True, later)
    assert habit.streak == 1


async def _user_id(db):
    user = await AuthService(db).signup("habits@example.com", "secret123", "Habit Person", "habits")
    return user.id


async def test_service_toggle_is_idempotent_within_a_day(db_session):
    user_id = await _user_id(db_session)
    service = HabitService(db_session, clock=lambda: DAY)
    habit = await service.create_habit(user_id, "Meditate")
    assert habit.category == "General"

    first = await service.update_habit(user_id, habit.id, completed_today=True)
    await service.update_habit(user_id, habit.id, completed_today=False)
    again = await service.update_habit(user_id, habit.id, completed_today=True)

    assert first.streak == 1
    assert again.streak == 1
    assert again.completed_today is True


async def test_service_accepts_neighbouring_client_date_and_reads_lapsed_streak_as_zero(db_session):
    user_id = await _user_id(db_session)
    service = HabitService(db_session, clock=lambda: DAY)
    habit = await service.create_habit(user_id, "Run")

    await service.update_habit(user_id, habit.id, completed_today=True, today=DAY - timedelta(days=1))
    extended = await service.update_habit(user_id, habit.id, completed_today=True)
    assert extended.streak == 2

    lapsed = HabitService(db_session, clock=lambda: DAY + timedelta(days=5))
    [listed] = await lapsed.list_habits(user_id)
    assert listed.streak == 0
    assert listed.completed_today is False


async def test_service_refuses_distant_and_backdated_client_dates(db_session):
    user_id = await _user_id(db_session)
    service = HabitService(db_session, clock=lambda: DAY)
    habit = await service.create_habit(user_id, "Journal")

    # consecutive future dates cannot pile up a streak within one real day
    for offset in (2, 3, 4):
        with pytest.raises(ValidationError):
            await service.update_habit(user_id, habit.id, completed_today=True, today=DAY + timedelta(days=offset))
    with pytest.raises(ValidationError):
        await service.update_habit(user_id, habit.id, completed_today=True, today=date(2020, 1, 1))

    await service.update_habit(user_id, habit.id, completed_today=True, today=DAY)
    ahead = await service.update_habit(user_id, habit.id, completed_today=True, today=DAY + timedelta(days=1))
    assert ahead.streak == 2

    # a date before the last completion would reset the stored streak
    with pytest.raises(ValidationError):
        await service.update_habit(user_id, habit.id, completed_today=True, today=DAY)

    [stored] = await HabitService(db_session, clock=lambda: DAY + timedelta(days=1)).list_habits(user_id)
    assert stored.streak == 2


async def test_service_validation_and_ownership(db_session):
    user_id = await _user_id(db_session)
    service = HabitService(db_session, clock=lambda: DAY)

    with pytest.raises(ValidationError):
        await service.create_habit(user_id, "   ")

    habit = await service.create_habit(user_id, "Stretch")
    with pytest.raises(NotFoundError):
        await service.update_habit("someone-else", habit.id, completed_today=True)
    with pytest.raises(ValidationError):
        await service.record_activity(user_id, "10/03/2026", [], 0, 0.0)


async def test_activity_snapshot_upserts_per_day(db_session):
    user_id = await _user_id(db_session)
    service = HabitService(db_session, clock=lambda: DAY)

    await service.record_activity(user_id, "2026-03-10", ["a"], 2, 0.5)
    await service.record_activity(user_id, "2026-03-10", ["a", "b"], 2, 1.0)

    summary = await service.summary(user_id)
    assert len(summary["recent_activity"]) == 1
    assert summary["recent_activity"][0].completion_rate == 1.0
