"""Auth routes and the bearer-token dependency."""
from datetime import timedelta

from app.infra.security.jwt import create_access_token

from conftest import auth


async def test_signup_returns_token_and_derives_username(client):
    resp = await client.post(
        "/api/auth/signup",
        json={"email": "Jane.Doe@Example.com", "password": "pw123456", "name": "Jane"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "jane.doe@example.com"
    assert body["user"]["username"] == "jane.doe"
    assert body["user"]["profile_visibility"] == "PUBLIC"

    me = await client.get("/api/auth/me", headers=auth(body["token"]))
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


async def test_signup_missing_fields_is_400(client):
    resp = await client.post("/api/auth/signup", json={"email": "x@example.com"})
    assert resp.status_code == 400


async def test_signup_duplicate_email_and_username_conflict(client, make_user):
    await make_user(username="taken", email="taken@example.com")

    dup_email = await client.post(
        "/api/auth/signup",
        json={"email": "TAKEN@example.com", "password": "pw", "name": "Other", "username": "fresh"},
    )
    dup_username = await client.post(
        "/api/auth/signup",
        json={"email": "new@example.com", "password": "pw", "name": "Other", "username": "taken"},
    )
    assert dup_email.status_code == 409
    assert dup_username.status_code == 409


async def test_default_username_gets_suffix_when_taken(client, make_user):
    await make_user(username="sam", email="someone@example.com")
    resp = await client.post(
        "/api/auth/signup",
        json={"email": "sam@example.com", "password": "pw123456", "name": "Sam"},
    )
    assert resp.status_code == 200
    username = resp.json()["user"]["username"]
    assert username.startswith("sam") and username != "sam"


async def test_login(client, make_user):
    await make_user(username="login", email="login@example.com", password="right-pass")

    ok = await client.post("/api/auth/login", json={"email": "login@example.com", "password": "right-pass"})
    bad = await client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrong"})
    unknown = await client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})

    assert ok.status_code == 200 and ok.json()["token"]
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid credentials"
    assert unknown.status_code == 401


async def test_missing_and_invalid_tokens(client, make_user):
    user, _ = await make_user()

    missing = await client.get("/api/auth/me")
    garbage = await client.get("/api/auth/me", headers=auth("not-a-jwt"))
    wrong_scheme = await client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
    expired = await client.get(
        "/api/auth/me",
        headers=auth(create_access_token(user.id, user.email, expires_delta=timedelta(minutes=-5))),
    )
    unknown_user = await client.get(
        "/api/auth/me", headers=auth(create_access_token("no-such-user", "ghost@example.com"))
    )

    assert missing.status_code == 401
    assert missing.json()["detail"] == "Missing Authorization header"
    for resp in (garbage, wrong_scheme, expired, unknown_user):
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired token"


async def test_health(client):
    for path in ("/health", "/api/health"):
        resp = await client.get(path)
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
