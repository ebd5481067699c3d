"""Feed, posts, likes and comments."""
from conftest import auth


async def _set_visibility(client, token, visibility):
    resp = await client.put("/api/settings/privacy", json={"profile_visibility": visibility}, headers=auth(token))
    assert resp.status_code == 200


async def _feed_contents(client, token):
    resp = await client.get("/api/posts/feed", headers=auth(token))
    assert resp.status_code == 200
    return [p["content"] for p in resp.json()]


async def test_friends_only_post_appears_after_friendship(client, make_user):
    a, a_token = await make_user(username="author")
    _, b_token = await make_user(username="reader")
    await _set_visibility(client, a_token, "FRIENDS")

    created = await client.post("/api/posts", json={"content": "Day 1 done"}, headers=auth(a_token))
    assert created.status_code == 200
    assert created.json()["author_username"] == "author"

    assert "Day 1 done" not in await _feed_contents(client, b_token)

    sent = await client.post("/api/friends/request", json={"username": "reader"}, headers=auth(a_token))
    await client.put(
        "/api/friends/respond",
        json={"request_id": sent.json()["id"], "action": "ACCEPT"},
        headers=auth(b_token),
    )

    assert "Day 1 done" in await _feed_contents(client, b_token)


async def test_private_and_blocked_authors_are_hidden(client, make_user):
    _, private_token = await make_user(username="hermit")
    loud, loud_token = await make_user(username="loud")
    _, viewer_token = await make_user(username="viewer")
    await _set_visibility(client, private_token, "PRIVATE")

    await client.post("/api/posts", json={"content": "secret"}, headers=auth(private_token))
    await client.post("/api/posts", json={"content": "hello world"}, headers=auth(loud_token))
    assert await _feed_contents(client, viewer_token) == ["hello world"]
    # authors always see their own posts
    assert set(await _feed_contents(client, private_token)) == {"secret", "hello world"}

    await client.post("/api/friends/block", json={"user_id": loud.id}, headers=auth(viewer_token))
    assert await _feed_contents(client, viewer_token) == []


async def test_empty_post_is_rejected(client, make_user):
    _, token = await make_user()
    resp = await client.post("/api/posts", json={"content": "   "}, headers=auth(token))
    assert resp.status_code == 400


async def test_like_toggles_and_notifies_author_once(client, make_user):
    _, author_token = await make_user(username="author")
    _, fan_token = await make_user(username="fan")
    post = (await client.post("/api/posts", json={"content": "ran 5k"}, headers=auth(author_token))).json()

    liked = await client.post(f"/api/posts/{post['id']}/like", headers=auth(fan_token))
    assert liked.json() == {"likes": 1, "liked": True}
    unliked = await client.post(f"/api/posts/{post['id']}/like", headers=auth(fan_token))
    assert unliked.json() == {"likes": 0, "liked": False}

    own = await client.post(f"/api/posts/{post['id']}/like", headers=auth(author_token))
    assert own.json() == {"likes": 1, "liked": True}

    inbox = (await client.get("/api/notifications", headers=auth(author_token))).json()
    assert [n["type"] for n in inbox] == ["LIKE"]
    assert inbox[0]["entity_id"] == post["id"]


async def test_like_on_invisible_post_is_404(client, make_user):
    _, author_token = await make_user(username="author")
    _, other_token = await make_user(username="other")
    post = (await client.post("/api/posts", json={"content": "mine"}, headers=auth(author_token))).json()
    await _set_visibility(client, author_token, "PRIVATE")

    assert (await client.post(f"/api/posts/{post['id']}/like", headers=auth(other_token))).status_code == 404
    assert (await client.post("/api/posts/missing/like", headers=auth(other_token))).status_code == 404


async def test_replies_are_attached_to_the_top_level_comment(client, make_user):
    _, author_token = await make_user(username="author")
    _, friend_token = await make_user(username="friend")
    post = (await client.post("/api/posts", json={"content": "10 days!"}, headers=auth(author_token))).json()

    top = await client.post(
        f"/api/posts/{post['id']}/comment", json={"content": "nice"}, headers=auth(friend_token)
    )
    assert top.status_code == 200
    reply = await client.post(
        f"/api/posts/{post['id']}/comment",
        json={"content": "thanks", "parent_id": top.json()["id"]},
        headers=auth(author_token),
    )
    nested = await client.post(
        f"/api/posts/{post['id']}/comment",
        json={"content": "anytime", "parent_id": reply.json()["id"]},
        headers=auth(friend_token),
    )
    assert reply.json()["parent_id"] == top.json()["id"]
    assert nested.json()["parent_id"] == top.json()["id"]

    [fed] = (await client.get("/api/posts/feed", headers=auth(friend_token))).json()
    assert [c["content"] for c in fed["comments"]] == ["nice", "thanks", "anytime"]

    # the author commenting on their own post does not notify themself
    inbox = (await client.get("/api/notifications", headers=auth(author_token))).json()
    assert [n["type"] for n in inbox] == ["COMMENT", "COMMENT"]


async def test_comment_parent_must_belong_to_post(client, make_user):
    _, token = await make_user()
    first = (await client.post("/api/posts", json={"content": "one"}, headers=auth(token))).json()
    second = (await client.post("/api/posts", json={"content": "two"}, headers=auth(token))).json()
    comment = (await client.post(f"/api/posts/{first['id']}/comment", json={"content": "c"}, headers=auth(token))).json()

    resp = await client.post(
        f"/api/posts/{second['id']}/comment",
        json={"content": "wrong thread", "parent_id": comment["id"]},
        headers=auth(token),
    )
    assert resp.status_code == 400
