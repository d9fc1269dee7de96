"""
Tests for health endpoint
"""
from fastapi import status


def test_health_endpoint(client):
    """Health is public and reports service, version and environment"""
    response = client.get("/api/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["status"] == "ok"
    assert data["service"] == "payzen-backend"
    assert data["version"]
    assert data["env"] in ["local", "staging", "prod"]


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["error"] is True
    assert body["status_code"] == 404
    assert body["path"] == "/api/does-not-exist"
