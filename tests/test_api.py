from __future__ import annotations

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from xrs_names.api import errors as api_errors
from xrs_names.api.deps import get_registry
from xrs_names.core import SERVICE_VERSION
from xrs_names.services import RegistryService

ALICE_ADDRESS = "Xrs" + "1a2b3c4d5e" * 4
BOB_ADDRESS = "Xrs" + "9z8y7x6w5v" * 4
ISO_Z = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _register(client, name, address=ALICE_ADDRESS, **extra):
    return client.post("/api/register", json={"name": name, "address": address, **extra})


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "XRS Names", "version": SERVICE_VERSION}


def test_security_headers_present(client):
    resp = client.get("/api/health")
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert "default-src 'self'" in resp.headers["content-security-policy"]


def test_register_and_resolve(client):
    resp = _register(client, "Alice", metadata={"description": "Alice test account", "x": "y"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["name"] == "alice.xrs"
    assert body["address"] == ALICE_ADDRESS
    assert ISO_Z.match(body["registered"])

    resolved = client.get("/api/resolve/alice.xrs")
    assert resolved.status_code == 200
    assert resolved.json() == {
        "name": "alice.xrs",
        "address": ALICE_ADDRESS,
        "registered": body["registered"],
        "metadata": {"description": "Alice test account"},
    }


def test_resolve_without_metadata_returns_null(client):
    _register(client, "bob", BOB_ADDRESS)
    assert client.get("/api/resolve/bob").json()["metadata"] is None


def test_resolve_errors(client):
    missing = client.get("/api/resolve/ghost")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Name not found", "name": "ghost.xrs"}

    invalid = client.get("/api/resolve/a--b")
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "Invalid name format"
    assert "rules" in invalid.json()


def test_check_availability(client):
    assert client.get("/api/check/alice").json() == {"name": "alice.xrs", "available": True}
    _register(client, "alice")
    assert client.get("/api/check/ALICE.xrs").json() == {"name": "alice.xrs", "available": False}

    bad = client.get("/api/check/x")
    assert bad.status_code == 400
    assert bad.json()["error"] == "Invalid name format"


def test_register_conflict(client):
    assert _register(client, "alice").status_code == 201

    resp = _register(client, "alice.xrs", BOB_ADDRESS)

    assert resp.status_code == 409
    assert resp.json() == {"error": "Name already registered", "name": "alice.xrs"}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"address": ALICE_ADDRESS}, "Name and address are required"),
        ({"name": "alice"}, "Name and address are required"),
        ({"name": "a", "address": ALICE_ADDRESS}, "Invalid name format"),
        ({"name": "alice", "address": "abc"}, "Invalid address format"),
    ],
)
def test_register_validation(client, payload, message):
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == message


def test_register_rejects_non_object_body(client):
    resp = client.post("/api/register", json=["alice", ALICE_ADDRESS])
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_register_rejects_oversized_body(client):
    payload = {"name": "alice", "address": ALICE_ADDRESS, "metadata": {"description": "x" * 20000}}
    resp = client.post("/api/register", json=payload)
    assert resp.status_code == 413


def test_reverse_lookup(client):
    _register(client, "alice")
    _register(client, "bob", BOB_ADDRESS)
    _register(client, "alice-alt")

    body = client.get(f"/api/reverse/{ALICE_ADDRESS}").json()

    assert body["address"] == ALICE_ADDRESS
    assert [entry["name"] for entry in body["names"]] == ["alice.xrs", "alice-alt.xrs"]
    assert body["primary"] == "alice.xrs"
    assert all(ISO_Z.match(entry["registered"]) for entry in body["names"])


def test_reverse_lookup_unknown_and_invalid(client):
    assert client.get(f"/api/reverse/{BOB_ADDRESS}").json() == {
        "address": BOB_ADDRESS,
        "names": [],
        "primary": None,
    }
    bad = client.get("/api/reverse/short")
    assert bad.status_code == 400
    assert bad.json() == {"error": "Invalid address format"}


def test_update_flow(client):
    _register(client, "alice")

    resp = client.put("/api/update/alice.xrs", json={"address": BOB_ADDRESS, "signature": "sig"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["name"] == "alice.xrs"
    assert body["address"] == BOB_ADDRESS
    assert ISO_Z.match(body["updated"])
    assert client.get("/api/resolve/alice").json()["address"] == BOB_ADDRESS


def test_update_errors(client):
    _register(client, "alice")

    unsigned = client.put("/api/update/alice", json={"address": BOB_ADDRESS})
    assert unsigned.status_code == 401
    assert unsigned.json() == {"error": "Signature required for updates"}

    bad_address = client.put("/api/update/alice", json={"address": "nope", "signature": "s"})
    assert bad_address.status_code == 400

    bad_name = client.put("/api/update/-x-", json={"address": BOB_ADDRESS, "signature": "s"})
    assert bad_name.status_code == 400

    missing = client.put("/api/update/ghost", json={"address": BOB_ADDRESS, "signature": "s"})
    assert missing.status_code == 404
    assert client.get("/api/check/ghost").json()["available"] is True


def test_search(client):
    _register(client, "alice")
    _register(client, "bob", BOB_ADDRESS)
    _register(client, "albert", BOB_ADDRESS)

    resp = client.get("/api/search", params={"q": "al", "limit": "5"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["query"] == "al"
    assert [r["name"] for r in body["results"]] == ["alice.xrs", "albert.xrs"]
    assert body["results"][1]["address"] == BOB_ADDRESS


def test_search_query_errors(client):
    assert client.get("/api/search").status_code == 400
    short = client.get("/api/search", params={"q": "a"})
    assert short.json() == {"error": "Query must be 2-32 characters"}
    collapsed = client.get("/api/search", params={"q": "a!!"})
    assert collapsed.json() == {"error": "Query too short after sanitization"}


def test_search_bad_limit_falls_back_to_default(client):
    _register(client, "alice")
    resp = client.get("/api/search", params={"q": "al", "limit": "lots"})
    assert resp.status_code == 200
    assert len(resp.json()["results"]) == 1


def test_recent(client):
    for name in ("one", "two", "three"):
        _register(client, name)

    body = client.get("/api/recent", params={"limit": 2}).json()

    assert [r["name"] for r in body["recent"]] == ["three.xrs", "two.xrs"]


def test_directory_pagination(client):
    for name in ("eve", "bob", "dan", "alice", "carol"):
        _register(client, name)

    body = client.get("/api/directory", params={"page": 1, "limit": 2}).json()

    assert [e["name"] for e in body["entries"]] == ["alice.xrs", "bob.xrs"]
    assert body["total"] == 5
    assert body["page"] == 1
    assert body["pages"] == 3


def test_directory_huge_page_is_empty_not_an_error(client):
    _register(client, "alice")

    resp = client.get("/api/directory", params={"page": "100000000000000000000", "limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["entries"] == []
    assert body["total"] == 1
    assert body["pages"] == 1


def test_stats(client):
    _register(client, "alice")
    _register(client, "alice2")
    _register(client, "bob", BOB_ADDRESS)

    assert client.get("/api/stats").json() == {
        "total_names": 3,
        "unique_owners": 2,
        "service": "XRS Names - Public Good",
        "version": SERVICE_VERSION,
    }


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found"}


def test_unhandled_errors_do_not_leak_detail(app):
    def explode():
        raise RuntimeError("secret connection string")

    app.add_api_route("/api/explode", explode)

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/api/explode")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "secret" not in resp.text
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "SAMEORIGIN"
    assert "default-src 'self'" in resp.headers["content-security-policy"]


class _RecordingLog:
    def __init__(self):
        self.events = []

    def error(self, event, **fields):
        self.events.append((event, fields))


class _UnavailableStore:
    def find_by_name(self, name):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))


def test_storage_failure_is_logged_with_operation(app, client, monkeypatch):
    recorder = _RecordingLog()
    monkeypatch.setattr(api_errors, "log", recorder)
    app.dependency_overrides[get_registry] = lambda: RegistryService(_UnavailableStore())

    resp = client.get("/api/resolve/alice.xrs")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error"}
    assert "locked" not in resp.text
    assert recorder.events == [
        (
            "registry_error",
            {
                "code": "storage_failure",
                "operation": "resolve",
                "method": "GET",
                "path": "/api/resolve/alice.xrs",
            },
        )
    ]
