from fastapi.testclient import TestClient

from kanjisrs.consts import VERSION
from kanjisrs.server import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_check_reading_endpoint():
    response = client.post(
        "/check/reading", json={"answer": "コンピューター", "accepted": ["こんぴゅーたー"]}
    )
    assert response.status_code == 200
    assert response.json() == {"result": "correct", "distance": None, "correct": True}


def test_check_reading_without_katakana_folding():
    response = client.post(
        "/check/reading",
        json={"answer": "パン", "accepted": ["ぱん"], "auto_convert_katakana": False},
    )
    assert response.json()["result"] == "incorrect"


def test_check_meaning_endpoint():
    response = client.post(
        "/check/meaning", json={"answer": "computer", "accepted": ["computerr"]}
    )
    assert response.status_code == 200
    assert response.json() == {"result": "almost_correct", "distance": 1, "correct": True}


def test_check_meaning_invalid_characters():
    response = client.post("/check/meaning", json={"answer": "いち", "accepted": ["One"]})
    data = response.json()
    assert data["result"] == "invalid_character_set"
    assert data["correct"] is False


def test_check_requires_accepted_list():
    response = client.post("/check/meaning", json={"answer": "one"})
    assert response.status_code == 422


def test_romaji_endpoint():
    response = client.post("/romaji", json={"text": "konpyu-ta-"})
    assert response.status_code == 200
    assert response.json() == {"kana": "こんぴゅーたー", "buffer": ""}


def test_romaji_endpoint_incremental():
    first = client.post("/romaji", json={"text": "ho", "finalize": False}).json()
    assert first == {"kana": "ほ", "buffer": ""}

    second = client.post("/romaji", json={"text": "nky", "finalize": False}).json()
    assert second == {"kana": "ん", "buffer": "ky"}

    third = client.post(
        "/romaji", json={"text": "o", "buffer": second["buffer"], "finalize": True}
    ).json()
    assert third == {"kana": "きょ", "buffer": ""}


def test_srs_next_endpoint():
    response = client.post(
        "/srs/next",
        json={
            "stage": 4,
            "meaning_correct": True,
            "reading_correct": True,
            "now": "2024-01-01T00:00:00Z",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["stage"] == 5
    assert data["stage_name"] == "Guru I"
    assert data["next_review_at"].startswith("2024-01-08T00:00:00")


def test_srs_next_regression_and_burned():
    data = client.post(
        "/srs/next", json={"stage": 9, "meaning_correct": False, "reading_correct": False}
    ).json()
    assert data["stage"] == 7

    data = client.post("/srs/next", json={"stage": 8, "meaning_correct": True}).json()
    assert data["stage"] == 9
    assert data["next_review_at"] is None


def test_srs_next_rejects_bad_input():
    assert client.post("/srs/next", json={"stage": 12, "meaning_correct": True}).status_code == 422
    response = client.post(
        "/srs/next",
        json={"stage": 1, "meaning_correct": True, "now": "2024-01-01T00:00:00"},
    )
    assert response.status_code == 400
