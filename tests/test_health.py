def test_root_says_running(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "API Running."


def test_health_reports_db(client):
    resp = client.get("/api/health")
    assert resp.json() == {"ok": True, "db": True}


def test_request_id_is_echoed(client):
    resp = client.get("/api/health", headers={"X-Request-Id": "abc123"})
    assert resp.headers["X-Request-Id"] == "abc123"

    assert client.get("/api/health").headers["X-Request-Id"]
