from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_admin_reload_unauthorized(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.post("/admin/reload")
    assert r.status_code == 200 and r.json()["ok"] is False


def test_admin_reload_ok(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.post("/admin/reload", headers={"x-admin-token": "secret"})
    assert r.status_code == 200 and r.json()["ok"] is True
    assert r.json()["count"] >= 1


def test_feedback_cache_admin(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    client.post("/classify", json={"question": "7 + 3", "user_answer": 9, "correct_answer": 10})

    r = client.get("/admin/feedback-cache", headers={"x-admin-token": "secret"})
    assert r.status_code == 200 and r.json()["size"] == 1

    r = client.delete("/admin/feedback-cache", headers={"x-admin-token": "secret"})
    assert r.json() == {"ok": True, "cleared": 1}

    r = client.get("/admin/feedback-cache", headers={"x-admin-token": "secret"})
    assert r.json()["size"] == 0


def test_feedback_cache_admin_unauthorized(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.delete("/admin/feedback-cache", headers={"x-admin-token": "wrong"})
    assert r.status_code == 401
