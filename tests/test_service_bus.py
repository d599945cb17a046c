"""
Service Bus Tests
-----------------
HTTP surface over an in-memory application context.
"""

import pytest
from fastapi.testclient import TestClient

from core.context import build_context
from infra.service_bus import create_app
from memory.store import InMemoryStore


class SilentSpeaker:
    async def speak(self, text, settings):
        pass


@pytest.fixture
def context():
    return build_context(store=InMemoryStore(), speaker=SilentSpeaker())


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as client:
        yield client


class TestServiceBus:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_skills(self, client):
        skills = {s["name"]: s["verbs"] for s in client.get("/skills").json()}

        assert skills["notes"] == ["clear_notes", "get_notes", "save_note"]
        assert "sos_send" in skills["satellite"]

    def test_run_plan(self, client):
        text = '{"plan": [{"do": "save_note", "text": "x"}, {"do": "get_notes"}, {"do": "nope"}]}'

        body = client.post("/run", json={"text": text}).json()

        assert body["lines"] == ["Saved note (1).", "1. x", "No skill for verb: nope"]
        assert [e["status"] for e in body["entries"]] == ["ok", "ok", "no_handler"]
        assert body["ok"] is False
        assert body["run_id"].startswith("run_")

    def test_run_natural_language(self, client):
        body = client.post("/run", json={"text": "emergency, stuck on trail"}).json()

        assert body["lines"] == ["SkyCall queued: emergency, stuck on trail"]
        assert body["entries"][0]["skill"] == "satellite"

    def test_run_requires_text(self, client):
        assert client.post("/run", json={}).status_code == 422

    def test_shortcut_after_repeated_runs(self, client, context):
        for _ in range(3):
            client.post("/run", json={"text": "note stretch"})
        client.post("/run", json={"text": "get_notes", "log_usage": False})

        body = client.get("/shortcut").json()

        assert body == {"shortcut": "note stretch", "threshold": 3}
        assert "get_notes" not in context.usage.counts()

    def test_reset_shortcut(self, client):
        for _ in range(3):
            client.post("/run", json={"text": "note stretch"})

        assert client.delete("/shortcut").json() == {"reset": True}
        assert client.get("/shortcut").json()["shortcut"] is None

    def test_no_context(self):
        with TestClient(create_app()) as client:
            assert client.get("/health").status_code == 200
            assert client.post("/run", json={"text": "x"}).status_code == 503
