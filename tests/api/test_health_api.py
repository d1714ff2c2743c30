from unittest.mock import AsyncMock, patch

from app.core.database import db_client


def test_health_check(test_client):
    with patch.object(db_client, "health_check", AsyncMock(return_value={"status": "healthy", "latency_ms": 1.5})):
        response = test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"
    assert body["database_latency_ms"] == 1.5
    assert "X-Request-ID" in response.headers


def test_health_check_degraded(test_client):
    with patch.object(db_client, "health_check", AsyncMock(return_value={"status": "unhealthy"})):
        response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
