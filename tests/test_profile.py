def test_create_profile_for_new_user(client, user):
    resp = client.post(
        "/api/profile",
        json={"status": "dev", "skills": "go, react"},
        headers=user["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "dev"
    assert data["skills"] == ["go", "react"]
    assert data["experience"] == []
    assert data["education"] == []
    assert data["user"] == user["id"]


def test_skills_string_is_split_and_trimmed(client, user):
    resp = client.post(
        "/api/profile",
        json={"status": "dev", "skills": "go, react, node"},
        headers=user["headers"],
    )
    assert resp.json()["skills"] == ["go", "react", "node"]


def test_second_submit_updates_the_same_profile(client, user, db):
    client.post(
        "/api/profile",
        json={"status": "dev", "skills": "go", "company": "Acme", "twitter": "https://twitter.com/a"},
        headers=user["headers"],
    )
    resp = client.post(
        "/api/profile",
        json={"status": "lead", "skills": "rust, go", "youtube": "https://youtube.com/a"},
        headers=user["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "lead"
    assert data["skills"] == ["rust", "go"]
    # los campos ausentes se conservan
    assert data["company"] == "Acme"
    assert data["social"] == {"twitter": "https://twitter.com/a", "youtube": "https://youtube.com/a"}
    assert db["profiles"].count_documents({}) == 1


def test_empty_optional_fields_are_ignored(client, user):
    client.post("/api/profile", json={"status": "dev", "skills": "go", "bio": "hi"}, headers=user["headers"])

    resp = client.post("/api/profile", json={"status": "dev", "skills": "go", "bio": ""}, headers=user["headers"])
    assert resp.json()["bio"] == "hi"


def test_status_and_skills_are_required(client, user):
    resp = client.post("/api/profile", json={"company": "Acme"}, headers=user["headers"])
    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert [e["param"] for e in errors] == ["status", "skills"]
    assert errors[0]["msg"] == "Status is required."
    assert errors[1]["msg"] == "Skills is required."


def test_blank_skills_list_is_rejected(client, user):
    resp = client.post("/api/profile", json={"status": "dev", "skills": " , "}, headers=user["headers"])
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["param"] == "skills"


def test_upsert_requires_token(client, db):
    resp = client.post("/api/profile", json={"status": "dev", "skills": "go"})
    assert resp.status_code == 401
    assert db["profiles"].count_documents({}) == 0


def test_me_without_profile(client, user):
    resp = client.get("/api/profile/me", headers=user["headers"])
    assert resp.status_code == 400
    assert resp.json() == {"msg": "There is no profile for this user."}


def test_me_populates_user(client, register):
    u = register(name="Linus")
    client.post("/api/profile", json={"status": "dev", "skills": "c"}, headers=u["headers"])

    resp = client.get("/api/profile/me", headers=u["headers"])
    assert resp.status_code == 200
    owner = resp.json()["user"]
    assert owner["id"] == u["id"]
    assert owner["name"] == "Linus"
    assert "avatar" in owner


def test_me_only_sees_own_profile(client, register):
    a = register()
    b = register()
    client.post("/api/profile", json={"status": "a-status", "skills": "go"}, headers=a["headers"])

    resp = client.get("/api/profile/me", headers=b["headers"])
    assert resp.status_code == 400


def test_list_profiles_is_public(client, register):
    for status in ("one", "two"):
        u = register()
        client.post("/api/profile", json={"status": status, "skills": "go"}, headers=u["headers"])

    resp = client.get("/api/profile")
    assert resp.status_code == 200
    assert sorted(p["status"] for p in resp.json()) == ["one", "two"]


def test_get_profile_by_user_id(client, user, profile):
    resp = client.get(f"/api/profile/user/{user['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == profile["id"]


def test_get_profile_by_unknown_or_malformed_id(client):
    for user_id in ("64b7f0c2a1b2c3d4e5f60718", "not-an-object-id"):
        resp = client.get(f"/api/profile/user/{user_id}")
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Profile not found."}


def test_delete_account_cascades(client, register, db):
    u = register()
    other = register()
    client.post("/api/profile", json={"status": "dev", "skills": "go"}, headers=u["headers"])
    client.post("/api/posts", json={"text": "mine"}, headers=u["headers"])
    client.post("/api/posts", json={"text": "theirs"}, headers=other["headers"])

    resp = client.delete("/api/profile", headers=u["headers"])
    assert resp.status_code == 200
    assert resp.json() == {"msg": "User deleted."}

    assert db["users"].count_documents({}) == 1
    assert db["profiles"].count_documents({}) == 0
    assert [p["text"] for p in db["posts"].find({})] == ["theirs"]
    assert client.get(f"/api/profile/user/{u['id']}").status_code == 400


def test_delete_account_reports_partial_failure(client, user, profile, monkeypatch):
    from devconnector.core.exceptions import StoreError
    from devconnector.repositories import profile_repo

    def boom(user_id):
        raise StoreError()

    monkeypatch.setattr(profile_repo, "delete_by_user", boom)

    resp = client.delete("/api/profile", headers=user["headers"])
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error.", "deleted": ["posts"]}


def test_store_fault_maps_to_generic_error(client, user, monkeypatch):
    from pymongo.errors import ServerSelectionTimeoutError

    from devconnector.infrastructure.db import mongo

    class BrokenCollection:
        def find_one_and_update(self, *args, **kwargs):
            raise ServerSelectionTimeoutError("mongo down")

    class BrokenDb:
        def __getitem__(self, name):
            return BrokenCollection()

    monkeypatch.setattr(mongo, "_db", BrokenDb())

    resp = client.post("/api/profile", json={"status": "dev", "skills": "go"}, headers=user["headers"])
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error."}


def test_store_unavailable_hides_detail(cfg, monkeypatch):
    from fastapi.testclient import TestClient

    from devconnector import main
    from devconnector.infrastructure.db import mongo

    mongo.close_mongo()
    # arranque sin base: init_mongo no conecta y `_db` queda en None
    monkeypatch.setattr(main, "init_mongo", lambda cfg: None)

    with TestClient(main.create_app(cfg)) as c:
        resp = c.get("/api/profile")

    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error."}


def test_concurrent_create_falls_back_to_update(client, user, db, monkeypatch):
    from bson import ObjectId
    from pymongo.errors import DuplicateKeyError

    from devconnector.infrastructure.db import mongo

    profiles = db["profiles"]
    uid = ObjectId(user["id"])
    calls = []

    class RacingProfiles:
        def find_one_and_update(self, *args, **kwargs):
            calls.append(kwargs.get("upsert", False))
            if len(calls) == 1:
                # otra petición crea el perfil entre el match y el insert
                profiles.insert_one({
                    "user": uid, "status": "first", "company": "Acme", "skills": ["go"],
                    "experience": [], "education": [], "social": {}, "rev": 0,
                })
                raise DuplicateKeyError("E11000 duplicate key error")
            return profiles.find_one_and_update(*args, **kwargs)

    class RacingDb:
        def __getitem__(self, name):
            return RacingProfiles() if name == "profiles" else db[name]

    monkeypatch.setattr(mongo, "_db", RacingDb())

    resp = client.post("/api/profile", json={"status": "dev", "skills": "rust"}, headers=user["headers"])
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["status"] == "dev"
    assert data["skills"] == ["rust"]
    assert data["company"] == "Acme"
    assert calls == [True, False]
    assert profiles.count_documents({}) == 1
