from fastapi.testclient import TestClient

from quickadd.main import app

NOW = "2025-06-10T09:00:00"
LABELS = [{"id": "9", "name": "errands", "color": None}]


def test_root_and_health():
    with TestClient(app) as client:
        assert client.get("/").json()["service"] == "quickadd"
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}


def test_parse_endpoint():
    with TestClient(app) as client:
        r = client.post("/parse", json={"text": "Buy milk tomorrow #errands !!", "labels": LABELS, "now": NOW})
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["clean_text"] == "Buy milk"
        assert data["has_any_pattern"] is True
        assert data["dates"][0]["resolved_date"] == "2025-06-11"
        assert data["dates"][0]["key"] == "date:tomorrow"
        assert data["labels"][0]["label_id"] == "9"
        assert data["priorities"][0]["priority_level"] == 2


def test_parse_endpoint_hides_dismissed():
    with TestClient(app) as client:
        r = client.post("/parse", json={"text": "ship it !!", "dismissed": ["priority:!!"], "now": NOW})
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["priorities"] == []
        assert data["has_any_pattern"] is False


def test_apply_endpoint_round_trips_a_pattern():
    with TestClient(app) as client:
        parsed = client.post("/parse", json={"text": "ship it !! now", "now": NOW}).json()
        pattern = parsed["priorities"][0]
        r = client.post("/parse/apply", json={"text": "ship it !! now", "pattern": pattern})
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["text"] == "ship it now"
        assert data["cursor"] == 8
        assert data["priority"] == 2


def test_apply_endpoint_rejects_unknown_kind():
    with TestClient(app) as client:
        bad = {"kind": "colour", "matched_text": "x", "start_index": 0, "end_index": 1}
        r = client.post("/parse/apply", json={"text": "x", "pattern": bad})
        assert r.status_code == 422


def test_ingest_builds_task_draft():
    with TestClient(app) as client:
        r = client.post("/ingest", json={"text": "Email Joel re SOW tomorrow #errands p:1", "labels": LABELS, "now": NOW})
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["title"] == "Email Joel re SOW"
        assert data["due_date"] == "2025-06-11"
        assert data["label_ids"] == ["9"]
        assert data["priority"] == 1


def test_ingest_requires_text():
    with TestClient(app) as client:
        r = client.post("/ingest", json={"text": ""})
        assert r.status_code == 422
