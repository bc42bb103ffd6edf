from collections.abc import Callable, Iterator

import mongomock
import pytest
from fastapi.testclient import TestClient

from devconnector.core import rate_limit
from devconnector.core.config import Settings
from devconnector.infrastructure.db import mongo
from devconnector.main import create_app


@pytest.fixture
def cfg() -> Settings:
    return Settings(
        jwt_secret="test-secret",
        mongo_db="devconnector_test",
        github_client_id="gh-id",
        github_secret="gh-secret",
        login_rate_per_min=100,
    )


@pytest.fixture
def db(cfg):
    mongo.init_mongo(cfg, client=mongomock.MongoClient())
    yield mongo.get_db()
    mongo.close_mongo()


@pytest.fixture
def client(cfg, db) -> Iterator[TestClient]:
    rate_limit.reset()
    app = create_app(cfg)
    with TestClient(app) as c:
        yield c
    rate_limit.reset()


@pytest.fixture
def register(client) -> Callable[..., dict]:
    """Registra un usuario y devuelve {"id", "token", "headers"}."""
    counter = {"n": 0}

    def _register(name: str = "Tester", email: str | None = None, password: str = "secret123") -> dict:
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        resp = client.post("/api/users", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        headers = {"x-auth-token": token}
        me = client.get("/api/auth", headers=headers)
        assert me.status_code == 200, me.text
        return {"id": me.json()["id"], "token": token, "headers": headers, "email": email}

    return _register


@pytest.fixture
def user(register) -> dict:
    return register()


@pytest.fixture
def profile(client, user) -> dict:
    resp = client.post(
        "/api/profile",
        json={"status": "dev", "skills": "go, react"},
        headers=user["headers"],
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
