"""Integration tests for /health, /healthz and /metrics endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from letterdesk.app.db.store import get_document_store
from letterdesk.app.main import app


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    def test_health_always_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_healthz_returns_200_when_store_ok(self, client: TestClient) -> None:
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["store"] == "ok"
        assert data["components"]["providers"] == {
            "openai": "not_configured",
            "anthropic": "not_configured",
        }

    def test_healthz_returns_503_when_store_fails(self, client: TestClient) -> None:
        broken_store = MagicMock()
        broken_store.ping.return_value = (False, "error: ConnectionError")
        app.dependency_overrides[get_document_store] = lambda: broken_store

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["store"] == "error: ConnectionError"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_exposes_letter_metrics(self, client: TestClient, form_payload: dict) -> None:
        client.post("/api/generate", json={"formData": form_payload})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        body = response.text
        assert "letter_generation_latency_ms" in body
        assert "documents_created_total" in body
        assert "payment_confirmations_total" in body


def test_root(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Letter of Explanation API"
