from fastapi.testclient import TestClient

from db import SessionLocal
from main import app
from models import Attempt

client = TestClient(app)


def test_tag_batch_records_duration_ms():
    r = client.post(
        "/tag-batch",
        json={"items": [{"id": "m10-1", "answer": 10}, {"id": "dbl-1", "answer": 9}]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body.get("attempt_id") is not None
    attempt_id = body["attempt_id"]

    db = SessionLocal()
    try:
        a = db.query(Attempt).filter(Attempt.id == attempt_id).first()
        assert a is not None
        assert isinstance(a.duration_ms, int)
        assert a.duration_ms >= 0
        wrong = a.incorrect_items()
        assert [res["tags"] for res in wrong] == [["complement_miss", "double_miss_low", "off_by_one"]]
    finally:
        db.close()


def test_tag_batch_keeps_client_duration():
    r = client.post(
        "/tag-batch", json={"items": [{"id": "m10-1", "answer": 10}], "duration_ms": 4321}
    )
    assert r.json()["duration_ms"] == 4321
