import requests

from devconnector.infrastructure.http import github_client


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def test_relays_github_listing(client, monkeypatch):
    calls = {}

    def fake_get(url, **kwargs):
        calls["url"] = url
        calls.update(kwargs)
        return FakeResponse(200, [{"name": "repo-a"}, {"name": "repo-b"}])

    monkeypatch.setattr(github_client.requests, "get", fake_get)

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 200
    assert resp.json() == [{"name": "repo-a"}, {"name": "repo-b"}]
    assert calls["url"] == "https://api.github.com/users/octocat/repos"
    assert calls["params"] == {"per_page": 5, "sort": "created", "direction": "asc"}
    assert calls["auth"] == ("gh-id", "gh-secret")
    assert calls["timeout"] == 10


def test_non_200_is_not_found(client, monkeypatch):
    monkeypatch.setattr(github_client.requests, "get", lambda url, **kw: FakeResponse(404, {"message": "Not Found"}))

    resp = client.get("/api/profile/github/nobody-here")
    assert resp.status_code == 404
    assert resp.json() == {"msg": "No Github profile found."}


def test_transport_error_is_server_error(client, monkeypatch):
    def boom(url, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(github_client.requests, "get", boom)

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error."}

