"""Notification delivery and the inbox endpoints."""
from app.domain.accounts.services import AuthService
from app.domain.notifications.models import NotificationType
from app.infra.db.repositories.notification_repo import NotificationRepository
from app.services.notification_service import deliver_notification

from conftest import auth


async def test_self_notifications_are_suppressed(db_session):
    me = await AuthService(db_session).signup("me@example.com", "secret123", "Me", "me")
    other = await AuthService(db_session).signup("other@example.com", "secret123", "Other", "other")

    suppressed = await deliver_notification(db_session, me.id, NotificationType.LIKE, me.id, "post-1", "liked")
    system = await deliver_notification(db_session, me.id, NotificationType.ACHIEVEMENT, None, "badge-1", "badge")
    delivered = await deliver_notification(db_session, me.id, NotificationType.LIKE, other.id, "post-1", "liked")
    await db_session.commit()

    assert suppressed is None
    assert system is not None and delivered is not None
    repo = NotificationRepository(db_session)
    assert await repo.count_unread(me.id) == 2


async def _seed_inbox(session_factory, recipient_id, sender_id, count):
    async with session_factory() as session:
        for i in range(count):
            await deliver_notification(
                session, recipient_id, NotificationType.COMMENT, sender_id, f"post-{i}", f"comment {i}"
            )
        await session.commit()


async def test_unread_count_read_and_read_all(client, make_user, session_factory):
    me, token = await make_user(username="me")
    sender, _ = await make_user(username="sender")
    await _seed_inbox(session_factory, me.id, sender.id, 3)

    assert (await client.get("/api/notifications/unread-count", headers=auth(token))).json() == {"unread": 3}

    inbox = (await client.get("/api/notifications", headers=auth(token))).json()
    assert len(inbox) == 3
    assert inbox[0]["sender"]["username"] == "sender"

    read = await client.put(f"/api/notifications/{inbox[0]['id']}/read", headers=auth(token))
    assert read.status_code == 200
    assert (await client.get("/api/notifications/unread-count", headers=auth(token))).json() == {"unread": 2}

    read_all = await client.put("/api/notifications/read-all", headers=auth(token))
    assert read_all.json() == {"ok": True, "updated": 2}
    assert (await client.get("/api/notifications/unread-count", headers=auth(token))).json() == {"unread": 0}


async def test_type_filter_and_limit(client, make_user, session_factory):
    me, token = await make_user()
    sender, _ = await make_user()
    await _seed_inbox(session_factory, me.id, sender.id, 2)
    async with session_factory() as session:
        await deliver_notification(session, me.id, NotificationType.ACHIEVEMENT, None, None, "Unlocked")
        await session.commit()

    achievements = await client.get("/api/notifications", params={"type": "ACHIEVEMENT"}, headers=auth(token))
    assert [n["content"] for n in achievements.json()] == ["Unlocked"]
    limited = await client.get("/api/notifications", params={"limit": 1}, headers=auth(token))
    assert len(limited.json()) == 1


async def test_other_users_notifications_are_not_reachable(client, make_user, session_factory):
    owner, owner_token = await make_user()
    sender, sender_token = await make_user()
    await _seed_inbox(session_factory, owner.id, sender.id, 1)
    [notification] = (await client.get("/api/notifications", headers=auth(owner_token))).json()

    read = await client.put(f"/api/notifications/{notification['id']}/read", headers=auth(sender_token))
    delete = await client.delete(f"/api/notifications/{notification['id']}", headers=auth(sender_token))
    assert read.status_code == 404
    assert delete.status_code == 404

    own_delete = await client.delete(f"/api/notifications/{notification['id']}", headers=auth(owner_token))
    assert own_delete.json() == {"ok": True}
    assert (await client.get("/api/notifications", headers=auth(owner_token))).json() == []
