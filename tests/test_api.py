"""Tests for the HTTP service."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from spendlog.api import create_app
from spendlog.services.storage import StorageError


@pytest.fixture
def client(category_model):
    app = create_app(use_storage=False, category_model=category_model)
    with TestClient(app) as test_client:
        yield test_client


def entry_payload(**overrides) -> dict:
    data = {
        "amount": 12.5,
        "category": "dining",
        "description": "ramen",
        "date": date.today().isoformat(),
    }
    data.update(overrides)
    return data


class TestVoiceProcess:

    def test_parses_utterance(self, client):
        response = client.post(
            "/api/voice-process",
            json={"text": "I spent 680 yen on matcha latte at Doutor"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["amount"] == 680
        assert body["currency"] == "JPY"
        assert body["category"] == "coffee"
        assert "Doutor" in body["location"]
        assert body["description"] == "I spent 680 yen on matcha latte at Doutor"
        assert 0.0 <= body["confidence"] <= 1.0
        assert set(body) == {
            "amount", "currency", "category", "description",
            "location", "date", "confidence", "timestamp",
        }

    @pytest.mark.parametrize("body", [
        {},
        {"text": ""},
        {"text": "   "},
        {"text": 123},
        {"message": "coffee"},
    ])
    def test_rejects_missing_text(self, client, body):
        response = client.post("/api/voice-process", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Text input is required"}

    def test_rejects_malformed_json(self, client):
        response = client.post(
            "/api/voice-process",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_rejects_empty_body(self, client):
        response = client.post("/api/voice-process")
        assert response.status_code == 400

    def test_internal_failure_is_generic(self, client, monkeypatch):
        def boom(text):
            raise RuntimeError("secret internals")

        monkeypatch.setattr(client.app.state.voice_flow.parser, "parse", boom)
        response = client.post("/api/voice-process", json={"text": "coffee"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process voice input"}


class TestSpending:

    def test_add_then_list(self, client):
        response = client.post("/api/spending", json=entry_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["id"].startswith("entry_")
        assert body["warnings"] == []

        listed = client.get("/api/spending").json()
        assert len(listed) == 1
        assert listed[0]["id"] == body["id"]
        assert listed[0]["amount"] == 12.5
        assert listed[0]["user"] == "sharing"
        assert listed[0]["currency"] == "USD"

    def test_get_by_id(self, client):
        entry_id = client.post("/api/spending", json=entry_payload()).json()["id"]

        response = client.get(f"/api/spending/{entry_id}")
        assert response.status_code == 200
        assert response.json()["description"] == "ramen"

    def test_get_unknown_id(self, client):
        response = client.get("/api/spending/entry_0_missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Spending entry not found"}

    def test_list_filters_by_category(self, client):
        client.post("/api/spending", json=entry_payload())
        client.post("/api/spending", json=entry_payload(category="coffee", description="latte"))

        response = client.get("/api/spending", params={"category": "coffee"})
        assert [e["description"] for e in response.json()] == ["latte"]

    def test_missing_fields(self, client):
        response = client.post("/api/spending", json={"amount": 5})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing required fields"
        assert {issue["field"] for issue in body["issues"]} == {"category", "description", "date"}

    def test_non_object_body(self, client):
        response = client.post("/api/spending", json=[1, 2, 3])
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    def test_future_date_is_a_warning(self, client):
        response = client.post("/api/spending", json=entry_payload(date="2999-01-01"))

        assert response.status_code == 200
        assert len(response.json()["warnings"]) == 1


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["storage"] == "memory"
        assert set(body["settings"]) == {"parser", "google_sheets", "app"}


class TestOutOfRangeInput:

    def test_overlong_numeral_is_parsed_as_no_amount(self, client):
        response = client.post("/api/voice-process", json={"text": "9" * 400 + " yen"})

        assert response.status_code == 200
        assert response.json()["amount"] == 0
        assert response.json()["currency"] == "JPY"

    def test_unencodable_text_is_a_client_error(self, client):
        response = client.post(
            "/api/voice-process",
            content=b'{"text": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Text input is required"}

    @pytest.mark.parametrize("amount", ["1e999", "9" * 400])
    def test_oversized_amount_is_not_saved(self, client, amount):
        response = client.post("/api/spending", json=entry_payload(amount=amount))

        assert response.status_code == 400
        assert response.json()["issues"][0]["field"] == "amount"

        listed = client.get("/api/spending")
        assert listed.status_code == 200
        assert listed.json() == []

    def test_serialization_failure_is_a_json_error(self, client, monkeypatch):
        def unrenderable(*args, **kwargs):
            return {"amount": float("inf")}

        monkeypatch.setattr(
            "spendlog.models.spending.ParsedSpending.model_dump", unrenderable
        )
        response = client.post("/api/voice-process", json={"text": "coffee"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process voice input"}

    def test_unknown_category_filter(self, client):
        response = client.get("/api/spending", params={"category": "yachts"})

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown spending category"}

    def test_storage_failure_on_list(self, client, monkeypatch):
        async def unavailable(**kwargs):
            raise StorageError("quota exceeded")

        monkeypatch.setattr(client.app.state.spending_flow._storage, "list_entries", unavailable)
        response = client.get("/api/spending")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch spending data"}
