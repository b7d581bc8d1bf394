import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from aether_zenith.api import app, get_session, get_settings


@pytest.fixture
def client(session, settings):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_settings_endpoint(client):
    body = client.get("/api/settings").json()
    assert body["window"]["width"] == 800
    assert body["progression"]["level_up_threshold"] == 1000


def test_profile_and_upgrades(client):
    assert client.get("/api/profile").json() == {
        "credits": 0.0,
        "upgrades": {"hull": 1, "engine": 1, "weapon": 1},
    }
    upgrades = client.get("/api/upgrades").json()
    assert upgrades["engine"] == {"level": 1, "max_level": 5, "next_cost": 750}


def test_buy_upgrade(client, session):
    res = client.post("/api/upgrades/hull")
    assert res.status_code == 200
    assert res.json()["reason"] == "insufficient_credits"

    session.store.save_credits(500)
    body = client.post("/api/upgrades/hull").json()
    assert body["ok"] is True
    assert body["upgrades"]["hull"]["level"] == 2
    assert client.post("/api/upgrades/warp").status_code == 404


def test_session_lifecycle(client):
    res = client.post("/api/session/start")
    assert res.status_code == 200
    assert res.json()["status"] == "playing"
    assert client.post("/api/session/start").status_code == 409
    assert client.post("/api/session/jump").status_code == 404

    body = client.post("/api/session/tick", json={"steps": 3, "held": ["left"]}).json()
    assert body["ticks"] == 3
    assert body["snapshot"]["player"]["x"] < 375

    client.post("/api/session/pause")
    assert client.post("/api/session/tick", json={}).json()["ticks"] == 0
    assert client.get("/api/session/snapshot").json()["status"] == "paused"


def test_tick_validation(client):
    client.post("/api/session/start")
    assert client.post("/api/session/tick", json={"dt": 5}).status_code == 422


def test_profile_reset(client, session):
    session.store.save_credits(42)
    body = client.post("/api/profile/reset").json()
    assert body["credits"] == 0.0


def test_parallel_ticks_run_one_at_a_time(client, session, monkeypatch):
    client.post("/api/session/start")
    guard = threading.Lock()
    active = {"now": 0, "max": 0}
    real_tick = session.tick

    def slow_tick(dt):
        with guard:
            active["now"] += 1
            active["max"] = max(active["max"], active["now"])
        time.sleep(0.05)
        try:
            return real_tick(dt)
        finally:
            with guard:
                active["now"] -= 1

    monkeypatch.setattr(session, "tick", slow_tick)
    with ThreadPoolExecutor(max_workers=4) as pool:
        responses = list(pool.map(lambda _: client.post("/api/session/tick", json={}), range(4)))

    assert [r.status_code for r in responses] == [200] * 4
    assert active["max"] == 1
    assert session.state.clock == pytest.approx(4 / 60)


def test_snapshot_leaves_notifications_queued(client, session):
    client.post("/api/session/start")
    session.state.notify("power_up", "SPREAD WEAPON!")

    body = client.get("/api/session/snapshot").json()
    assert "notifications" not in body
    drained = client.post("/api/session/notifications").json()["notifications"]
    assert [n["kind"] for n in drained] == ["power_up"]
    assert client.post("/api/session/notifications").json()["notifications"] == []


def test_tick_delivers_notifications(client, session):
    client.post("/api/session/start")
    session.state.notify("shield_activated", "Shield Activated!")
    body = client.post("/api/session/tick", json={}).json()
    assert [n["kind"] for n in body["notifications"]] == ["shield_activated"]
