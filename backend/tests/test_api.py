import json

import httpx
from fastapi.testclient import TestClient
from google.genai import errors

from main import app

client = TestClient(app)

REFLECTION_REQUEST = {
    "type": "reflection-prompts",
    "data": {
        "cardName": "The Fool",
        "cardKeywords": ["new beginnings"],
        "hexagramName": "The Creative",
    },
}

COMPAT_REQUEST = {
    "type": "compatibility-report",
    "data": {
        "personA": {"name": "Alex", "birthDate": "1990-04-12", "location": "Lisbon"},
        "personB": {"name": "Sam", "birthDate": "1992-10-03"},
        "reportType": "Romantic",
    },
}


def _shape(value):
    if isinstance(value, dict):
        return {k: _shape(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_shape(v) for v in value]
    return type(value).__name__


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data


def test_reflection_prompts_invalid_json_from_upstream(fake_gemini):
    fake_gemini("Here are some questions: 1) ...")
    response = client.post("/ai", json=REFLECTION_REQUEST)
    assert response.status_code == 200
    data = response.json()
    assert len(data["questions"]) == 3
    for q in data["questions"]:
        assert q.strip()
        assert "new beginnings" in q or "life" in q
    assert "timestamp" in data


def test_compatibility_report_after_three_timeouts(fake_gemini):
    models = fake_gemini(httpx.ReadTimeout("timed out"))
    response = client.post("/ai", json=COMPAT_REQUEST)
    assert response.status_code == 200
    data = response.json()
    assert len(models.calls) == 3
    assert 65 <= data["score"] <= 85
    assert len(data["stats"]) == 4
    assert data["personAName"] == "Alex"
    assert data["personBName"] == "Sam"
    assert data["reportType"] == "Romantic"
    assert "generatedAt" in data
    assert "spring" in data["insight"]


def test_compatibility_report_generated(fake_gemini):
    fake_gemini(
        json.dumps(
            {
                "score": 64,
                "title": "Alex & Sam: Slow Burn",
                "summary": "Different rhythms, shared purpose.",
                "stats": [
                    {"label": "Karmic Bond", "score": 71, "description": "Old ties."},
                    {"label": "Communication", "score": 58, "description": "Work at it."},
                    {"label": "Passion", "score": 66, "description": "Steady."},
                    {"label": "Values", "score": 62, "description": "Aligned."},
                ],
            }
        )
    )
    response = client.post("/ai", json=COMPAT_REQUEST)
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Alex & Sam: Slow Burn"
    assert "promising" in data["insight"]


def test_compatibility_report_with_nan_stats_falls_back(fake_gemini):
    stats = ", ".join(
        f'{{"label": "S{i}", "score": NaN, "description": "d"}}' for i in range(4)
    )
    fake_gemini(f'{{"score": 70, "title": "t", "summary": "s", "stats": [{stats}]}}')
    response = client.post("/ai", json=COMPAT_REQUEST)
    assert response.status_code == 200
    data = response.json()
    assert 65 <= data["score"] <= 85
    assert data["title"] != "t"
    assert all(0 <= s["score"] <= 100 for s in data["stats"])


def test_unknown_type():
    response = client.post("/ai", json={"type": "unknown-kind", "data": {}})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_TYPE"


def test_missing_data():
    response = client.post("/ai", json={"type": "card-interpretation"})
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "MISSING_FIELDS"
    assert body["error"]


def test_missing_payload_fields():
    response = client.post("/ai", json={"type": "card-interpretation", "data": {"cardName": "The Fool"}})
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "MISSING_FIELDS"
    assert "hexagramName" in body["details"]


def test_data_not_an_object():
    response = client.post("/ai", json={"type": "card-interpretation", "data": ["x"]})
    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_FIELDS"


def test_invalid_json_body():
    response = client.post("/ai", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_JSON"


def test_upstream_401_is_not_retried(fake_gemini):
    models = fake_gemini(errors.ClientError(401, {"error": {"code": 401, "message": "bad key", "status": "UNAUTHENTICATED"}}))
    response = client.post(
        "/ai",
        json={
            "type": "card-interpretation",
            "data": {"cardName": "The Fool", "cardKeywords": [], "hexagramName": "The Creative"},
        },
    )
    assert response.status_code == 500
    assert response.json()["code"] == "INVALID_API_KEY"
    assert len(models.calls) == 1


def test_rate_limited_after_retries(fake_gemini):
    models = fake_gemini(errors.ClientError(429, {"error": {"code": 429, "message": "slow down"}}))
    response = client.post(
        "/ai",
        json={
            "type": "structured-reflection",
            "data": {"cardName": "The Fool", "hexagramName": "The Creative"},
        },
    )
    assert response.status_code == 500
    assert response.json()["code"] == "RATE_LIMIT"
    assert len(models.calls) == 3


def test_structured_reflection_missing_field(fake_gemini):
    fake_gemini(json.dumps({"iChingReflection": "a", "tarotReflection": "b", "synthesis": "c"}))
    response = client.post(
        "/ai",
        json={
            "type": "structured-reflection",
            "data": {"cardName": "The Fool", "hexagramName": "The Creative", "isReversed": True},
        },
    )
    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "UNKNOWN_ERROR"
    assert "reflectionPrompt" in body["details"]


def test_structured_reflection_ok(fake_gemini):
    fake_gemini(
        json.dumps(
            {
                "iChingReflection": "a",
                "tarotReflection": "b",
                "synthesis": "c",
                "reflectionPrompt": "d?",
            }
        )
    )
    response = client.post(
        "/ai",
        json={"type": "structured-reflection", "data": {"cardName": "The Fool", "hexagramName": "The Creative"}},
    )
    assert response.status_code == 200
    assert set(response.json()) == {
        "iChingReflection", "tarotReflection", "synthesis", "reflectionPrompt", "timestamp",
    }


def test_missing_api_key(monkeypatch):
    from services import gemini_client

    gemini_client.reset_client()
    monkeypatch.setattr(gemini_client.settings, "gemini_api_key", "")
    response = client.post(
        "/ai",
        json={
            "type": "personalized-guidance",
            "data": {"cardName": "The Star", "hexagramName": "Peace", "timeOfDay": "morning"},
        },
    )
    assert response.status_code == 500
    assert response.json()["code"] == "MISSING_API_KEY"


def test_routing_is_idempotent_in_shape(fake_gemini):
    fake_gemini("A grounded message for the evening.")
    request = {
        "type": "personalized-guidance",
        "data": {"cardName": "The Star", "hexagramName": "Peace", "timeOfDay": "evening"},
    }
    first = client.post("/ai", json=request)
    second = client.post("/ai", json=request)
    assert first.status_code == second.status_code == 200
    assert _shape(first.json()) == _shape(second.json())


def test_invalid_retry_settings_return_error_body(monkeypatch):
    from config import settings

    monkeypatch.setattr(settings, "retry_backoff_multiplier", 1.0)
    response = client.post(
        "/ai",
        json={"type": "card-interpretation", "data": {"cardName": "The Fool", "hexagramName": "The Creative"}},
    )
    assert response.status_code == 500
    assert response.json()["code"] == "UNKNOWN_ERROR"


def test_unexpected_handler_error_is_mapped(monkeypatch):
    from services.handlers.card_interpretation import CardInterpretationHandler

    def broken(self, payload):
        raise KeyError("template")

    monkeypatch.setattr(CardInterpretationHandler, "build_prompt", broken)
    response = client.post(
        "/ai",
        json={
            "type": "card-interpretation",
            "data": {"cardName": "The Fool", "hexagramName": "The Creative"},
        },
    )
    assert response.status_code == 500
    assert response.json()["code"] == "UNKNOWN_ERROR"
