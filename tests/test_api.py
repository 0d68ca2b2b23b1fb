"""API tests against a SQLite file store. /health does not touch the database."""

import importlib

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from rolodex.infrastructure import Settings


def _settings(tmp_path, **overrides) -> Settings:
    values = {
        "database_url": f"sqlite:///{tmp_path / 'api.db'}",
        "create_schema": True,
        "probe_delay": 0.0,
        "pool_size": 4,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def client(tmp_path):
    with TestClient(create_app(_settings(tmp_path))) as client:
        yield client


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_banner(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "running" in r.text


def test_create_then_search(client):
    r = client.post("/api/contacts", json={"phone": "555 1234", "name": "Alice"})
    assert r.status_code == 201
    body = r.json()
    assert body["message"]
    assert isinstance(body["id"], int)

    r = client.get("/api/contacts/search", params={"q": "5551234", "type": "phone"})
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 1
    assert body["limit"] == 100
    assert [c["name"] for c in body["results"]] == ["Alice"]
    assert body["results"][0]["photo_url"] is None


def test_create_same_phone_merges(client):
    first = client.post("/api/contacts", json={"phone": "1", "name": "A", "photo_url": "http://img/a.png"}).json()
    second = client.post("/api/contacts", json={"phone": "1", "name": "B", "photo_url": ""}).json()
    assert first["id"] == second["id"]
    results = client.get("/api/contacts/search", params={"q": "B", "type": "name"}).json()["results"]
    assert results == [{"id": first["id"], "phone": "1", "name": "B", "photo_url": None}]


def test_create_requires_phone_and_name(client):
    r = client.post("/api/contacts", json={"phone": "1"})
    assert r.status_code == 400
    assert "required" in r.json()["error"]


def test_search_requires_q(client):
    r = client.get("/api/contacts/search")
    assert r.status_code == 400
    assert '"q"' in r.json()["error"]


def test_suggestions_return_bare_list(client):
    client.post("/api/contacts/sync", json={"contacts": [
        {"phone": f"555{i}", "names": f"Name {i}"} for i in range(7)
    ]})
    r = client.get("/api/contacts/suggestions", params={"q": "555"})
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body, list)
    assert len(body) == 5
    assert set(body[0]) == {"phone", "name", "photo_url"}


def test_numbers_listing(client):
    client.post("/api/contacts/sync", json={"contacts": [
        {"phone": "1", "names": "a"},
        {"phone": "2", "names": "b"},
        {"phone": "3", "names": "c"},
    ]})
    r = client.get("/api/numbers", params={"page": "2", "limit": "2"})
    assert r.status_code == 200
    assert r.json() == {"page": 2, "limit": 2, "numbers": [{"phone": "3"}]}


def test_sync_reports_affected_rows(client):
    payload = {"contacts": [
        {"phone": "1", "names": "a", "photo_url": "http://img/1.png"},
        {"phone": "2", "names": "b"},
    ]}
    r = client.post("/api/contacts/sync", json=payload)
    assert r.status_code == 201
    assert r.json()["affectedRows"] == 2
    r = client.post("/api/contacts/sync", json=payload)
    assert r.json()["affectedRows"] == 2


@pytest.mark.parametrize("payload", [{}, {"contacts": []}, {"contacts": "nope"}])
def test_sync_rejects_empty_or_malformed(client, payload):
    r = client.post("/api/contacts/sync", json=payload)
    assert r.status_code == 400
    assert "error" in r.json()


def test_store_failure_is_500(tmp_path):
    app = create_app(_settings(tmp_path, create_schema=False))
    with TestClient(app) as client:
        r = client.get("/api/numbers")
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal server error"
    assert "contacts" in body["details"]


def test_api_key_gate(tmp_path):
    app = create_app(_settings(tmp_path, api_key="s3cret"))
    with TestClient(app) as client:
        assert client.get("/api/numbers").status_code == 401
        assert client.get("/api/numbers", headers={"x-api-key": "wrong"}).status_code == 401
        assert client.get("/api/numbers", headers={"x-api-key": "s3cret"}).status_code == 200
        assert client.get("/health").status_code == 200


def test_entry_point_exits_when_store_unreachable(tmp_path, monkeypatch):
    entry = importlib.import_module("api.__main__")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'contacts.db'}")
    monkeypatch.setenv("DB_PROBE_ATTEMPTS", "3")
    monkeypatch.setenv("DB_PROBE_DELAY", "0")

    def fail_run(*args, **kwargs):
        raise AssertionError("server must not start")

    monkeypatch.setattr(entry.uvicorn, "run", fail_run)
    assert entry.main() == 1


def test_unbounded_limit_store_failure_is_json_500(client):
    r = client.get("/api/numbers", params={"limit": "99999999999999999999"})
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    body = r.json()
    assert body["error"] == "Internal server error"
    assert body["details"]


def test_entry_point_uses_settings_log_level(tmp_path, monkeypatch):
    import logging

    entry = importlib.import_module("api.__main__")
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'contacts.db'}")
    monkeypatch.setenv("DB_PROBE_ATTEMPTS", "1")
    monkeypatch.setenv("DB_PROBE_DELAY", "0")
    monkeypatch.setenv("LOG_LEVEL", " warning ")
    assert entry.main() == 1
    assert root.level == logging.WARNING
