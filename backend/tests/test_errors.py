"""
Tests for the error boundary: typed errors, request validation and
unexpected exceptions all come out as the JSON error envelope.
"""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from pydantic import BaseModel

from adventure_api.api.errors import register_exception_handlers
from adventure_api.api.middleware import RequestLoggingMiddleware
from adventure_api.core.errors import ApiError, ConflictError, ErrorKind, NotFoundError, ValidationError
from adventure_api.schemas.envelope import respond


class Payload(BaseModel):
    name: str
    count: int


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("X")

    @app.get("/duplicate")
    async def duplicate():
        raise ConflictError("Already there", errors=[{"field": "email", "message": "taken"}])

    @app.get("/legacy")
    async def legacy():
        raise ConflictError("User already exists", status_code=400)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("connection to db-primary:5432 refused, password=hunter2")

    @app.post("/echo")
    async def echo(payload: Payload):
        return respond(payload.model_dump(), "Echoed")

    return app


@pytest_asyncio.fixture
async def boundary_client():
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_typed_error_uses_its_status_and_message(boundary_client: AsyncClient):
    response = await boundary_client.get("/missing")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "X"}
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_typed_error_field_details(boundary_client: AsyncClient):
    response = await boundary_client.get("/duplicate")
    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Already there",
        "errors": [{"field": "email", "message": "taken"}],
    }


@pytest.mark.asyncio
async def test_status_override(boundary_client: AsyncClient):
    response = await boundary_client.get("/legacy")
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


@pytest.mark.asyncio
async def test_unexpected_error_is_generic(boundary_client: AsyncClient):
    """Internals never reach the client."""
    response = await boundary_client.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error"}
    assert "hunter2" not in response.text
    assert "db-primary" not in response.text


@pytest.mark.asyncio
async def test_request_validation_lists_fields(boundary_client: AsyncClient):
    response = await boundary_client.post("/echo", json={"count": "many"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"name", "count"}


@pytest.mark.asyncio
async def test_success_envelope(boundary_client: AsyncClient):
    response = await boundary_client.post("/echo", json={"name": "rope", "count": 2})
    assert response.status_code == 200
    assert response.json() == {
        "statusCode": 200,
        "data": {"name": "rope", "count": 2},
        "message": "Echoed",
        "success": True,
    }


@pytest.mark.asyncio
async def test_request_id_is_propagated(boundary_client: AsyncClient):
    response = await boundary_client.get("/missing", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_error_kinds_map_to_status_codes():
    assert NotFoundError().status_code == 404
    assert ValidationError().status_code == 400
    assert ConflictError().status_code == ErrorKind.CONFLICT.status_code == 409
    assert ApiError().status_code == 500
    assert NotFoundError().message == "Not found"
