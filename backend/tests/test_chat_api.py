"""Direct rooms, message history and block enforcement in chat."""
from sqlalchemy.exc import OperationalError

from app.domain.accounts.services import AuthService
from app.domain.chat import services as chat_services
from app.domain.chat.services import ChatService
from app.infra.db.repositories.notification_repo import NotificationRepository

from conftest import auth


async def _room(client, token, target_id):
    resp = await client.post("/api/chat/rooms", json={"target_user_id": target_id}, headers=auth(token))
    assert resp.status_code == 200
    return resp.json()


async def test_direct_room_is_reused_from_either_side(client, make_user):
    alice, alice_token = await make_user(username="alice")
    bob, bob_token = await make_user(username="bob")

    first = await _room(client, alice_token, bob.id)
    again = await _room(client, alice_token, bob.id)
    reverse = await _room(client, bob_token, alice.id)

    assert first["id"] == again["id"] == reverse["id"]
    assert first["is_group"] is False
    assert {p["id"] for p in first["participants"]} == {alice.id, bob.id}

    rooms = (await client.get("/api/chat/rooms", headers=auth(bob_token))).json()
    assert [r["id"] for r in rooms] == [first["id"]]


async def test_room_errors(client, make_user):
    alice, alice_token = await make_user(username="alice")
    self_room = await client.post("/api/chat/rooms", json={"target_user_id": alice.id}, headers=auth(alice_token))
    missing = await client.post("/api/chat/rooms", json={"target_user_id": "ghost"}, headers=auth(alice_token))
    assert self_room.status_code == 400
    assert missing.status_code == 404


async def test_send_and_read_messages_with_reply(client, make_user):
    alice, alice_token = await make_user(username="alice", name="Alice")
    bob, bob_token = await make_user(username="bob")
    room = await _room(client, alice_token, bob.id)

    hello = await client.post(
        f"/api/chat/rooms/{room['id']}/messages", json={"content": "hi bob"}, headers=auth(alice_token)
    )
    assert hello.status_code == 200
    answer = await client.post(
        f"/api/chat/rooms/{room['id']}/messages",
        json={"content": "hey!", "reply_to_id": hello.json()["id"]},
        headers=auth(bob_token),
    )
    assert answer.json()["reply_to"]["id"] == hello.json()["id"]
    assert answer.json()["reply_to"]["sender"]["username"] == "alice"

    history = (await client.get(f"/api/chat/rooms/{room['id']}/messages", headers=auth(alice_token))).json()
    assert [m["content"] for m in history] == ["hi bob", "hey!"]

    rooms = (await client.get("/api/chat/rooms", headers=auth(alice_token))).json()
    assert rooms[0]["last_message"]["content"] == "hey!"

    inbox = (await client.get("/api/notifications", headers=auth(bob_token))).json()
    assert [n["type"] for n in inbox] == ["MESSAGE"]
    assert inbox[0]["content"] == "Alice: hi bob"


async def test_message_validation_and_membership(client, make_user):
    alice, alice_token = await make_user(username="alice")
    bob, _ = await make_user(username="bob")
    carol, carol_token = await make_user(username="carol")
    room = await _room(client, alice_token, bob.id)
    other = await _room(client, alice_token, carol.id)
    foreign = (await client.post(
        f"/api/chat/rooms/{other['id']}/messages", json={"content": "x"}, headers=auth(alice_token)
    )).json()

    blank = await client.post(f"/api/chat/rooms/{room['id']}/messages", json={"content": " "}, headers=auth(alice_token))
    bad_reply = await client.post(
        f"/api/chat/rooms/{room['id']}/messages",
        json={"content": "re", "reply_to_id": foreign["id"]},
        headers=auth(alice_token),
    )
    outsider = await client.get(f"/api/chat/rooms/{room['id']}/messages", headers=auth(carol_token))
    unknown = await client.get("/api/chat/rooms/nope/messages", headers=auth(alice_token))

    assert blank.status_code == 400
    assert bad_reply.status_code == 400
    assert outsider.status_code == 403
    assert unknown.status_code == 404


async def test_block_refuses_messages_until_unblocked(client, make_user):
    a, a_token = await make_user(username="alice")
    b, b_token = await make_user(username="bob")
    room = await _room(client, a_token, b.id)

    await client.post("/api/friends/block", json={"user_id": b.id}, headers=auth(a_token))

    refused = await client.post(
        f"/api/chat/rooms/{room['id']}/messages", json={"content": "hello?"}, headers=auth(b_token)
    )
    assert refused.status_code == 403
    assert (await client.get("/api/chat/rooms", headers=auth(b_token))).json() == []
    assert (await client.post("/api/chat/rooms", json={"target_user_id": a.id}, headers=auth(b_token))).status_code == 403

    await client.post("/api/friends/unblock", json={"user_id": b.id}, headers=auth(a_token))

    allowed = await client.post(
        f"/api/chat/rooms/{room['id']}/messages", json={"content": "hello?"}, headers=auth(b_token)
    )
    assert allowed.status_code == 200


async def test_failed_notification_fan_out_keeps_the_message(db_session, monkeypatch):
    alice = await AuthService(db_session).signup("alice@example.com", "secret123", "Alice", "alice")
    bob = await AuthService(db_session).signup("bob@example.com", "secret123", "Bob", "bob")
    service = ChatService(db_session)
    room = await service.get_or_create_direct_room(alice, bob.id)

    async def failing_delivery(*args, **kwargs):
        raise OperationalError("INSERT INTO notifications", {}, Exception("database is locked"))

    monkeypatch.setattr(chat_services, "deliver_notification", failing_delivery)
    sent = await service.send_message(alice, room.id, "still here")

    assert sent.message.content == "still here"
    history = await service.list_messages(bob, room.id)
    assert [v.message.id for v in history] == [sent.message.id]
    assert await NotificationRepository(db_session).count_unread(bob.id) == 0
