"""
Shared fixtures for the Skill Swap API tests.

Each test gets its own SQLite file and its own application instance.
The ``TestClient`` is used as a context manager so that the startup
hook applies the schema migrations.
"""

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from promote_admin import set_admin
from skill_swap_api.app.core.config import Settings
from skill_swap_api.app.core.db import Database
from skill_swap_api.app.main import create_app

API = "/api"
PASSWORD = "secret1"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "skill_swap_test.db"),
        secret_key="test-secret-key-that-is-long-enough-for-hs256",
        bcrypt_rounds=4,
        cors_origins=[],
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(settings, client) -> Database:
    # Depends on ``client`` so the schema exists.
    return Database.from_settings(settings)


def auth(token: str) -> Dict[str, str]:
    return {"x-auth-token": token}


@pytest.fixture
def register(client) -> Callable[..., Dict]:
    """Register a user and return ``{"id", "token", "headers", "email"}``."""

    def _register(username: str, email: str = None, password: str = PASSWORD) -> Dict:
        email = email or f"{username}@x.com"
        resp = client.post(
            f"{API}/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        token = resp.json()["token"]
        profile = client.get(f"{API}/users/profile", headers=auth(token)).json()
        return {"id": profile["id"], "token": token, "headers": auth(token), "email": email}

    return _register


@pytest.fixture
def make_admin(db) -> Callable[[Dict], Dict]:
    """Promote a registered user directly in the store."""

    def _make_admin(user: Dict) -> Dict:
        assert set_admin(db, user["email"], True) is not None
        return user

    return _make_admin


@pytest.fixture
def alice(register):
    return register("alice")


@pytest.fixture
def bob(register):
    return register("bob")


@pytest.fixture
def carol(register):
    return register("carol")


@pytest.fixture
def request_swap(client):
    """Send a swap request and return the created record."""

    def _request(requester: Dict, responder: Dict, offered="Guitar", wanted="Cooking", **extra):
        body = {
            "responderId": responder["id"],
            "skillOfferedByRequester": offered,
            "skillWantedByRequester": wanted,
        }
        body.update(extra)
        resp = client.post(f"{API}/swaps/request", json=body, headers=requester["headers"])
        assert resp.status_code == 201, resp.text
        return resp.json()["swapRequest"]

    return _request
