"""
Tests for app-level routes: liveness, metrics, location and unknown paths.
"""

import pytest
from httpx import AsyncClient

from adventure_api.core.config import get_settings


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"].startswith("Welcome to")


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    await client.get("/health")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "http_request_latency_seconds" in response.text


@pytest.mark.asyncio
async def test_openapi_documents_error_envelope(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {"success", "message", "errors"}

    signup_responses = schema["paths"]["/api/auth/signUp"]["post"]["responses"]
    assert signup_responses["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


@pytest.mark.asyncio
async def test_unknown_route_is_404(client: AsyncClient):
    response = await client.get("/api/nowhere")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reverse_location_without_key(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "OPENCAGE_API_KEY", "")
    response = await client.get("/api/location/reverse", params={"lat": 51.5, "lng": -0.12})
    assert response.status_code == 200
    assert response.json()["data"] == {"city": "", "country": ""}


@pytest.mark.asyncio
async def test_reverse_location_rejects_bad_coordinates(client: AsyncClient):
    response = await client.get("/api/location/reverse", params={"lat": 123, "lng": 0})
    assert response.status_code == 400
