from datetime import timedelta

from conftest import API, PASSWORD, auth
from skill_swap_api.app.core.security import create_access_token, decode_access_token


def test_register_returns_token_for_new_user(client, settings):
    resp = client.post(
        f"{API}/auth/register",
        json={"username": "alice", "email": "alice@x.com", "password": PASSWORD},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["msg"] == "Registration successful"
    payload = decode_access_token(body["token"], settings)
    assert payload["user"]["isAdmin"] is False
    assert isinstance(payload["user"]["id"], int)


def test_register_rejects_duplicate_email(client, alice):
    resp = client.post(
        f"{API}/auth/register",
        json={"username": "alice2", "email": "ALICE@x.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert resp.json()["msg"] == "User with this email already exists"


def test_register_rejects_duplicate_username(client, alice):
    resp = client.post(
        f"{API}/auth/register",
        json={"username": "alice", "email": "other@x.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert resp.json()["msg"] == "User with this username already exists"


def test_register_validates_fields(client):
    cases = [
        {"username": "al", "email": "al@x.com", "password": PASSWORD},
        {"username": "alice", "email": "not-an-email", "password": PASSWORD},
        {"username": "alice", "email": "alice@x.com", "password": "123"},
        {"username": "alice", "email": "alice@x.com"},
    ]
    for body in cases:
        resp = client.post(f"{API}/auth/register", json=body)
        assert resp.status_code == 400, body
        assert resp.json()["msg"]


def test_login_success_and_failures(client, alice):
    ok = client.post(f"{API}/auth/login", json={"email": "Alice@X.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["msg"] == "Login successful"
    assert ok.json()["token"]

    wrong = client.post(f"{API}/auth/login", json={"email": "alice@x.com", "password": "nope12"})
    assert wrong.status_code == 400
    assert wrong.json() == {"msg": "Invalid credentials"}

    unknown = client.post(f"{API}/auth/login", json={"email": "ghost@x.com", "password": PASSWORD})
    assert unknown.status_code == 400
    assert unknown.json() == {"msg": "Invalid credentials"}


def test_protected_route_requires_token(client):
    resp = client.get(f"{API}/users/profile")
    assert resp.status_code == 401
    assert resp.json() == {"msg": "No token, authorization denied"}


def test_invalid_and_expired_tokens_are_rejected(client, settings, alice):
    garbage = client.get(f"{API}/users/profile", headers=auth("not.a.token"))
    assert garbage.status_code == 401
    assert garbage.json() == {"msg": "Token is not valid"}

    expired = create_access_token(
        alice["id"], False, settings, expires_delta=timedelta(seconds=-5)
    )
    resp = client.get(f"{API}/users/profile", headers=auth(expired))
    assert resp.status_code == 401


def test_token_for_missing_user_is_rejected(client, settings):
    token = create_access_token(999, False, settings)
    resp = client.get(f"{API}/users/profile", headers=auth(token))
    assert resp.status_code == 401


def test_banned_user_cannot_log_in_or_use_old_token(client, alice, bob, make_admin):
    make_admin(alice)
    ban = client.put(f"{API}/admin/users/ban/{bob['id']}", headers=alice["headers"])
    assert ban.status_code == 200

    login = client.post(f"{API}/auth/login", json={"email": bob["email"], "password": PASSWORD})
    assert login.status_code == 403

    profile = client.get(f"{API}/users/profile", headers=bob["headers"])
    assert profile.status_code == 403
