import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_check_exact(client):
    resp = client.post(
        "/api/accuracy/check", json={"expected": "I love you", "spoken": "I love you"}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["is_correct"] is True
    assert data["accuracy"] == 100
    assert data["missing_words"] == []


def test_check_reports_wrong_word(client):
    resp = client.post(
        "/api/accuracy/check", json={"expected": "I love you", "spoken": "I hate you"}
    )
    data = resp.json()
    assert data["is_correct"] is False
    assert data["wrong_words"] == ['"hate" instead of "love"']


def test_check_uses_character_names(client):
    body = {"expected": "tell johannes to wait", "spoken": "tell johansson to wait"}
    assert client.post("/api/accuracy/check", json=body).json()["is_correct"] is False

    body["character_names"] = ["Johannes Brahms"]
    assert client.post("/api/accuracy/check", json=body).json()["is_correct"] is True


def test_missing_field_is_rejected(client):
    resp = client.post("/api/accuracy/check", json={"expected": "hello"})
    assert resp.status_code == 400
    assert "spoken" in resp.json()["error"]


def test_non_json_body_is_rejected(client):
    resp = client.post("/api/accuracy/realtime", content=b"not json")
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_bad_strict_mode_is_rejected(client):
    resp = client.post(
        "/api/accuracy/check",
        json={"expected": "hi there", "spoken": "hi there", "strict_mode": "yes"},
    )
    assert resp.status_code == 400


def test_realtime(client):
    resp = client.post(
        "/api/accuracy/realtime",
        json={"expected": "I am going home", "spoken": "I am leaving"},
    )
    assert resp.json() == {"matched": 2, "has_error": True}


def test_locked_round_trip(client):
    expected = "I am going home"
    state = None
    for spoken in ("I am", "I am going", "I am going home"):
        body = {"expected": expected, "spoken": spoken}
        if state is not None:
            body["prev_state"] = state
        resp = client.post("/api/accuracy/locked", json=body)
        assert resp.status_code == 200
        state = resp.json()
        state.pop("complete")

    assert state["locked_count"] == 4
    assert state["has_error"] is False

    resp = client.post(
        "/api/accuracy/locked", json={"expected": expected, "spoken": "I am", "prev_state": state}
    )
    data = resp.json()
    assert data["locked_count"] == 4
    assert data["complete"] is True


def test_locked_rejects_bad_state(client):
    resp = client.post(
        "/api/accuracy/locked",
        json={"expected": "hi", "spoken": "hi", "prev_state": {"locked_count": -1}},
    )
    assert resp.status_code == 400


def test_subsequence(client):
    resp = client.post(
        "/api/accuracy/subsequence",
        json={"expected": "one two three four five", "spoken": "one WRONG three four five"},
    )
    data = resp.json()
    assert data["matched_indices"] == [0, 2, 3, 4]
    assert data["matched_count"] == 4
    assert data["coverage"] == pytest.approx(0.8)


def test_word_by_word(client):
    resp = client.post(
        "/api/accuracy/word-by-word", json={"expected": "I love you", "spoken": "I hate you"}
    )
    assert resp.json() == {
        "results": ["correct", "wrong", "correct"],
        "spoken_words": ["i", "hate", "you"],
    }


def test_segments(client):
    resp = client.post(
        "/api/segments", json={"line": "I can't believe you did that to me"}
    )
    assert resp.json() == {"segments": ["I can't believe you", "did that to me"]}


def test_segments_rejects_bad_chunk_size(client):
    resp = client.post("/api/segments", json={"line": "hello there", "chunk_size": 0})
    assert resp.status_code == 400
