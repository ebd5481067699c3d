"""Friend requests, friend lists, blocking and privacy-aware profiles over HTTP."""
from conftest import auth


async def _befriend(client, sender, sender_token, receiver, receiver_token):
    sent = await client.post(
        "/api/friends/request", json={"username": receiver.username}, headers=auth(sender_token)
    )
    assert sent.status_code == 200
    accepted = await client.put(
        "/api/friends/respond",
        json={"request_id": sent.json()["id"], "action": "ACCEPT"},
        headers=auth(receiver_token),
    )
    assert accepted.status_code == 200
    return accepted.json()


async def test_request_accept_and_list(client, make_user):
    alice, alice_token = await make_user(username="alice", name="Alice")
    bob, bob_token = await make_user(username="bob", name="Bob")

    sent = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    assert sent.status_code == 200
    assert sent.json()["status"] == "PENDING"

    incoming = await client.get("/api/friends/requests", headers=auth(bob_token))
    assert [r["sender"]["username"] for r in incoming.json()] == ["alice"]

    accepted = await client.put(
        "/api/friends/respond",
        json={"request_id": sent.json()["id"], "action": "ACCEPT"},
        headers=auth(bob_token),
    )
    assert accepted.json()["status"] == "ACCEPTED"

    for token, expected in ((alice_token, "bob"), (bob_token, "alice")):
        friends = await client.get("/api/friends/list", headers=auth(token))
        assert [f["username"] for f in friends.json()] == [expected]

    # both sides were notified
    alice_inbox = await client.get("/api/notifications", headers=auth(alice_token))
    bob_inbox = await client.get("/api/notifications", headers=auth(bob_token))
    assert [n["type"] for n in alice_inbox.json()] == ["FRIEND_REQUEST"]
    assert [n["type"] for n in bob_inbox.json()] == ["FRIEND_REQUEST"]
    assert bob_inbox.json()[0]["sender"]["username"] == "alice"


async def test_request_uniqueness_per_pair(client, make_user):
    _, alice_token = await make_user(username="alice")
    _, bob_token = await make_user(username="bob")

    first = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    again = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    reverse = await client.post("/api/friends/request", json={"username": "alice"}, headers=auth(bob_token))

    assert first.status_code == 200
    assert again.status_code == 409
    assert reverse.status_code == 409


async def test_rejected_request_can_be_sent_again(client, make_user):
    _, alice_token = await make_user(username="alice")
    _, bob_token = await make_user(username="bob")

    sent = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    rejected = await client.put(
        "/api/friends/respond",
        json={"request_id": sent.json()["id"], "action": "REJECT"},
        headers=auth(bob_token),
    )
    assert rejected.json()["status"] == "REJECTED"

    retry = await client.post("/api/friends/request", json={"username": "alice"}, headers=auth(bob_token))
    assert retry.status_code == 200
    assert retry.json()["status"] == "PENDING"
    assert retry.json()["id"] == sent.json()["id"]


async def test_request_errors(client, make_user):
    _, alice_token = await make_user(username="alice")
    _, bob_token = await make_user(username="bob")

    unknown = await client.post("/api/friends/request", json={"username": "ghost"}, headers=auth(alice_token))
    to_self = await client.post("/api/friends/request", json={"username": "alice"}, headers=auth(alice_token))
    assert unknown.status_code == 404
    assert to_self.status_code == 400

    sent = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    # only the receiver may answer
    by_sender = await client.put(
        "/api/friends/respond",
        json={"request_id": sent.json()["id"], "action": "ACCEPT"},
        headers=auth(alice_token),
    )
    assert by_sender.status_code == 404


async def test_search_excludes_self_and_blocked(client, make_user):
    _, alice_token = await make_user(username="alice")
    await make_user(username="alicia")
    blocked, _ = await make_user(username="alina")

    await client.post("/api/friends/block", json={"user_id": blocked.id}, headers=auth(alice_token))
    resp = await client.get("/api/friends/search", params={"username": "ali"}, headers=auth(alice_token))

    assert [u["username"] for u in resp.json()] == ["alicia"]


async def test_block_hides_friend_and_refuses_requests(client, make_user):
    alice, alice_token = await make_user(username="alice")
    bob, bob_token = await make_user(username="bob")
    await _befriend(client, alice, alice_token, bob, bob_token)

    blocked = await client.post("/api/friends/block", json={"user_id": bob.id}, headers=auth(alice_token))
    assert blocked.status_code == 200
    twice = await client.post("/api/friends/block", json={"user_id": bob.id}, headers=auth(alice_token))
    assert twice.status_code == 200

    assert (await client.get("/api/friends/list", headers=auth(bob_token))).json() == []
    listed = await client.get("/api/friends/blocked", headers=auth(alice_token))
    assert [u["id"] for u in listed.json()] == [bob.id]

    profile = await client.get(f"/api/friends/{alice.id}", headers=auth(bob_token))
    assert profile.status_code == 403
    assert profile.json()["detail"] == "User is blocked"

    unblocked = await client.post("/api/friends/unblock", json={"user_id": bob.id}, headers=auth(alice_token))
    assert unblocked.json() == {"ok": True, "removed": True}
    assert [u["username"] for u in (await client.get("/api/friends/list", headers=auth(bob_token))).json()] == ["alice"]


async def test_blocked_user_cannot_send_request(client, make_user):
    alice, alice_token = await make_user(username="alice")
    _, bob_token = await make_user(username="bob")
    await client.post("/api/friends/block", json={"user_id": alice.id}, headers=auth(bob_token))

    resp = await client.post("/api/friends/request", json={"username": "bob"}, headers=auth(alice_token))
    assert resp.status_code == 403


async def test_block_self_and_unknown(client, make_user):
    alice, alice_token = await make_user(username="alice")
    assert (await client.post("/api/friends/block", json={"user_id": alice.id}, headers=auth(alice_token))).status_code == 400
    assert (await client.post("/api/friends/block", json={"user_id": "nope"}, headers=auth(alice_token))).status_code == 404
