from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_get_attempt_roundtrip():
    # create one
    r = client.post("/tag-batch", json={"items": [{"id": "m10-1", "answer": 10}]})
    assert r.status_code == 200
    attempt_id = r.json().get("attempt_id")
    assert isinstance(attempt_id, int)

    # read it back
    r2 = client.get(f"/attempts/{attempt_id}")
    assert r2.status_code == 200
    body = r2.json()
    assert body["id"] == attempt_id
    assert body["total"] == 1
    assert "created_at" in body
    assert body["items"][0]["response"]["correct"] is True


def test_get_attempt_404():
    r = client.get("/attempts/999999")
    assert r.status_code == 404


def test_attempt_summary():
    r = client.post(
        "/tag-batch",
        json={
            "items": [
                {"id": "m10-1", "answer": 7},
                {"id": "m10-2", "answer": 9},
                {"id": "dbl-1", "answer": 10},
            ]
        },
    )
    attempt_id = r.json()["attempt_id"]

    r2 = client.get(f"/attempts/{attempt_id}/summary")
    assert r2.status_code == 200
    body = r2.json()
    assert body["incorrect"] == 2
    assert body["patterns"][0]["tag"] == "make-10"
    assert body["patterns"][0]["count"] == 2
    assert "2 questions" in body["feedback"]


def test_attempt_summary_all_correct():
    r = client.post("/tag-batch", json={"items": [{"id": "dbl-2", "answer": 12}]})
    body = client.get(f"/attempts/{r.json()['attempt_id']}/summary").json()
    assert body["incorrect"] == 0 and body["patterns"] == []
    assert "Keep practicing" in body["feedback"]


def test_recent_list_requires_key(monkeypatch):
    monkeypatch.setenv("GRADING_API_KEY", "k")
    monkeypatch.delenv("ADMIN_TOKEN", raising=False)
    r = client.get("/attempts/recent-list")
    assert r.status_code == 401


def test_recent_list_by_session(monkeypatch):
    monkeypatch.setenv("GRADING_API_KEY", "k")
    client.post(
        "/tag-batch",
        json={"items": [{"id": "add-1", "answer": 6}], "session_id": "sess-recent"},
    )
    r = client.get(
        "/attempts/recent-list", params={"session_id": "sess-recent"}, headers={"x-api-key": "k"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True and body["count"] == 1
    assert body["items"][0]["session_id"] == "sess-recent"
    assert "items" not in body["items"][0]
