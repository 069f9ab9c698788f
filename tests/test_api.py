"""Integration tests for the terragen REST API."""

import time

import pytest
from fastapi.testclient import TestClient

from terragen.api.app import create_app

SCRIPT = "CoastLine!count=1!life=40!branchInterval=10\nnewPhase\nSmooth!count=2!life=10\n"


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def _create(client, **body):
    payload = {"config": {"random_seed": 42, "grid_size": 16}, "script": SCRIPT}
    payload.update(body)
    resp = client.post("/api/generator/sessions", json=payload)
    assert resp.status_code == 200
    return resp.json()


class TestHealthCheck:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestSessionLifecycle:
    def test_create_session_defaults(self, client):
        resp = client.post("/api/generator/sessions", json={})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "created"
        assert data["tick_count"] == 0
        assert data["current_phase"] == -1
        assert data["grid_size"] == 128  # default

    def test_create_session_with_config(self, client):
        data = _create(client)
        assert data["grid_size"] == 16
        assert data["phases_count"] == 2
        assert data["config"]["random_seed"] == 42

    def test_create_session_from_preset(self, client):
        resp = client.post("/api/generator/sessions", json={"preset": "coast_only"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["config"]["experiment_name"] == "coast_only"
        assert data["name"] == "coast_only"
        assert data["phases_count"] == 1

    def test_unknown_preset(self, client):
        resp = client.post("/api/generator/sessions", json={"preset": "atlantis"})
        assert resp.status_code == 404

    def test_invalid_config(self, client):
        resp = client.post("/api/generator/sessions", json={"config": {"grid_size": 0}})
        assert resp.status_code == 422
        resp = client.post("/api/generator/sessions", json={"config": {"no_such_field": 1}})
        assert resp.status_code == 422

    def test_list_sessions(self, client):
        _create(client)
        _create(client)
        resp = client.get("/api/generator/sessions")
        assert resp.status_code == 200
        assert len(resp.json()) >= 2

    def test_get_session(self, client):
        sid = _create(client)["id"]
        resp = client.get(f"/api/generator/sessions/{sid}")
        assert resp.status_code == 200
        assert resp.json()["id"] == sid

    def test_get_session_not_found(self, client):
        resp = client.get("/api/generator/sessions/nonexistent")
        assert resp.status_code == 404

    def test_delete_session(self, client):
        sid = _create(client)["id"]
        resp = client.delete(f"/api/generator/sessions/{sid}")
        assert resp.status_code == 200
        assert resp.json()["deleted"] is True

        resp = client.get(f"/api/generator/sessions/{sid}")
        assert resp.status_code == 404

    def test_delete_session_not_found(self, client):
        resp = client.delete("/api/generator/sessions/nonexistent")
        assert resp.status_code == 404

    def test_delete_while_running_conflicts(self, client):
        sid = _create(client)["id"]
        mgr = client.app.state.session_manager
        mgr._running.add(sid)
        try:
            resp = client.delete(f"/api/generator/sessions/{sid}")
            assert resp.status_code == 409
            assert client.get(f"/api/generator/sessions/{sid}").status_code == 200
        finally:
            mgr._running.discard(sid)


class TestStepAndRun:
    def test_step_one_tick(self, client):
        sid = _create(client)["id"]
        resp = client.post(f"/api/generator/sessions/{sid}/step", json={"n": 1})
        assert resp.status_code == 200
        data = resp.json()
        assert data["tick_count"] == 1
        assert data["current_phase"] == 0
        assert data["status"] == "running"
        assert data["live_agents"] >= 0

    def test_step_rejects_zero(self, client):
        sid = _create(client)["id"]
        resp = client.post(f"/api/generator/sessions/{sid}/step", json={"n": 0})
        assert resp.status_code == 422

    def test_run_to_completion(self, client):
        sid = _create(client)["id"]
        resp = client.post(f"/api/generator/sessions/{sid}/run")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "completed"
        assert data["is_over"] is True
        assert data["live_agents"] == 0

    def test_step_past_end_stops(self, client):
        sid = _create(client)["id"]
        resp = client.post(f"/api/generator/sessions/{sid}/step", json={"n": 100000})
        data = resp.json()
        assert data["is_over"] is True
        ticks = data["tick_count"]
        resp = client.post(f"/api/generator/sessions/{sid}/step", json={"n": 1})
        assert resp.json()["tick_count"] == ticks + 1

    def test_run_async(self, client):
        sid = _create(client)["id"]
        resp = client.post(f"/api/generator/sessions/{sid}/run_async")
        assert resp.status_code == 200
        for _ in range(200):
            data = client.get(f"/api/generator/sessions/{sid}").json()
            if data["status"] == "completed":
                break
            time.sleep(0.05)
        assert data["status"] == "completed"

    def test_reset(self, client):
        sid = _create(client)["id"]
        client.post(f"/api/generator/sessions/{sid}/run")
        resp = client.post(f"/api/generator/sessions/{sid}/reset")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "created"
        assert data["tick_count"] == 0
        assert data["is_started"] is False

    def test_step_not_found(self, client):
        resp = client.post("/api/generator/sessions/nope/step", json={"n": 1})
        assert resp.status_code == 404


class TestScriptEndpoints:
    def test_get_script(self, client):
        sid = _create(client)["id"]
        resp = client.get(f"/api/generator/sessions/{sid}/script")
        assert resp.status_code == 200
        lines = resp.json()["script"].splitlines()
        assert lines[0].startswith("CoastLine!")
        assert lines[1] == "newPhase"

    def test_put_script_resets(self, client):
        sid = _create(client)["id"]
        client.post(f"/api/generator/sessions/{sid}/step", json={"n": 3})
        resp = client.put(f"/api/generator/sessions/{sid}/script",
                          json={"script": "Mountain!count=2\nVolcano!count=1\n"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["tick_count"] == 0
        assert data["phases_count"] == 1

    def test_phases(self, client):
        sid = _create(client)["id"]
        resp = client.get(f"/api/generator/sessions/{sid}/phases")
        assert resp.status_code == 200
        phases = resp.json()
        assert [p["phase"] for p in phases] == [0, 1]
        smooth = phases[1]["agents"][0]
        assert smooth["type_name"] == "Smooth"
        assert smooth["values"]["count"] == 2
        assert smooth["line"].startswith("Smooth!")

    def test_history(self, client):
        sid = _create(client)["id"]
        client.post(f"/api/generator/sessions/{sid}/run")
        resp = client.get(f"/api/generator/sessions/{sid}/history")
        assert resp.status_code == 200
        history = resp.json()
        assert len(history) == 2
        assert history[1]["type_counts"] == {"Smooth": 2}
        assert history[0]["finished_tick"] is not None

    def test_heightmap(self, client):
        sid = _create(client)["id"]
        client.post(f"/api/generator/sessions/{sid}/run")
        resp = client.get(f"/api/generator/sessions/{sid}/heightmap")
        assert resp.status_code == 200
        data = resp.json()
        assert data["size"] == 16
        assert len(data["heights"]) == 16
        assert data["max_height"] >= data["min_height"]


class TestCatalog:
    def test_agent_types(self, client):
        resp = client.get("/api/catalog/agent-types")
        assert resp.status_code == 200
        names = [t["type_name"] for t in resp.json()]
        assert names == ["CoastLine", "Mountain", "Smooth", "River", "Beach"]

    def test_agent_type_properties(self, client):
        types = {t["type_name"]: t["properties"] for t in client.get("/api/catalog/agent-types").json()}
        assert "vertexLimit" in types["CoastLine"]

    def test_presets(self, client):
        resp = client.get("/api/catalog/presets")
        assert resp.status_code == 200
        assert "island" in resp.json()

    def test_preset_detail(self, client):
        resp = client.get("/api/catalog/presets/island")
        assert resp.status_code == 200
        assert "CoastLine!" in resp.json()["script"]

    def test_preset_not_found(self, client):
        resp = client.get("/api/catalog/presets/atlantis")
        assert resp.status_code == 404
