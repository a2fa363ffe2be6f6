# FILE: tests/test_routers.py
"""Tests for the HTTP surface: auth, SSE chat, approval and access endpoints."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient

from main import app
from vocapp.execution import PendingCommandStore
from vocapp.security import AccessConfigStore, AccessScope
from test_orchestrator import FakeBackend, make_orchestrator

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def client():
    with patch("vocapp.config.API_TOKEN", TOKEN):
        yield TestClient(app)


@pytest.fixture
def pending(workspace):
    store = PendingCommandStore()
    with patch("vocapp.execution.router.get_pending_store", return_value=store):
        yield store


@pytest.fixture
def access(workspace):
    store = AccessConfigStore(AccessScope(workdir=str(workspace)))
    with patch("vocapp.execution.router.get_access_store", return_value=store), \
            patch("vocapp.execution.executor.get_access_store", return_value=store):
        yield store


def sse_events(text):
    return [json.loads(chunk[len("data: "):]) for chunk in text.split("\n\n") if chunk.startswith("data: ")]


class TestAuth:
    """Every /api route except health needs the process token."""

    def test_missing_token(self, client):
        resp = client.post("/api/reject", json={"token": "x"})
        assert resp.status_code == 401

    def test_wrong_token(self, client):
        resp = client.post("/api/reject", json={"token": "x"}, headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_header_token(self, client, pending):
        resp = client.post("/api/reject", json={"token": "x"}, headers={"X-API-Token": TOKEN})
        assert resp.status_code == 200

    def test_health_is_open(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert "access_mode" in body
        assert set(body["providers"]) == {"ollama", "openai", "anthropic"}


class TestApproval:
    """POST /api/execute and /api/reject."""

    def test_execute_runs_pending_command(self, client, pending, access):
        token = pending.propose("ls", "List.").token
        resp = client.post("/api/execute", json={"token": token}, headers=AUTH)
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert "FutbolDB" in body["stdout"]

    def test_execute_twice(self, client, pending, access):
        token = pending.propose("ls", "List.").token
        assert client.post("/api/execute", json={"token": token}, headers=AUTH).status_code == 200
        resp = client.post("/api/execute", json={"token": token}, headers=AUTH)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid or expired token."

    def test_execute_bad_token(self, client, pending):
        resp = client.post("/api/execute", json={"token": "nope"}, headers=AUTH)
        assert resp.status_code == 400

    def test_reject_always_acknowledged(self, client, pending):
        token = pending.propose("mv a b", "Move.").token
        assert client.post("/api/reject", json={"token": token}, headers=AUTH).json() == {"ok": True, "removed": True}
        assert client.post("/api/reject", json={"token": token}, headers=AUTH).json() == {"ok": True, "removed": False}
        assert client.post("/api/reject", json={}, headers=AUTH).json() == {"ok": True, "removed": False}


class TestAccessEndpoints:
    def test_get(self, client, access):
        resp = client.get("/api/access", headers=AUTH)
        assert resp.json() == {"mode": "workdir", "allowedPaths": []}

    def test_update(self, client, access):
        resp = client.post("/api/access", json={"mode": "allowlist", "allowedPaths": ["/srv/data"]}, headers=AUTH)
        assert resp.status_code == 200
        assert resp.json() == {"mode": "allowlist", "allowedPaths": ["/srv/data"]}
        assert access.get().mode.value == "allowlist"

    def test_update_rejects_bad_mode(self, client, access):
        resp = client.post("/api/access", json={"mode": "bogus"}, headers=AUTH)
        assert resp.status_code == 400
        assert access.get().mode.value == "workdir"

    def test_update_rejects_empty_allowlist(self, client, access):
        resp = client.post("/api/access", json={"mode": "allowlist", "allowedPaths": []}, headers=AUTH)
        assert resp.status_code == 400


class TestChatEndpoint:
    """POST /api/chat streams SSE events."""

    def test_listing_turn(self, client, workspace):
        orch = make_orchestrator(workspace, FakeBackend())
        with patch("vocapp.chat.router.get_orchestrator", return_value=orch):
            resp = client.post(
                "/api/chat",
                json={"sessionId": "abc", "history": [{"role": "user", "content": "list the folders"}]},
                headers=AUTH,
            )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        events = sse_events(resp.text)
        assert events[-1]["type"] == "final"
        payload = events[-1]["payload"]
        assert payload["command"] == "internal:list dirs ."
        assert orch.sessions.peek("abc").last_listing == ["AndroidDevelpment", "FutbolDB", "Unity"]

    def test_summary_turn_streams_tokens(self, client, workspace):
        orch = make_orchestrator(workspace, FakeBackend(summary=""))
        with patch("vocapp.chat.router.get_orchestrator", return_value=orch):
            resp = client.post(
                "/api/chat",
                json={"sessionId": "abc", "history": [{"role": "user", "content": "resume la carpeta FutbolDB"}]},
                headers=AUTH,
            )
        kinds = [e["type"] for e in sse_events(resp.text)]
        assert kinds[0] == "executed"
        assert kinds[-2:] == ["summary_complete", "final"]

    def test_no_user_message(self, client):
        resp = client.post("/api/chat", json={"history": []}, headers=AUTH)
        assert resp.status_code == 400

    def test_requires_token(self, client):
        resp = client.post("/api/chat", json={"history": [{"role": "user", "content": "hi"}]})
        assert resp.status_code == 401


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
