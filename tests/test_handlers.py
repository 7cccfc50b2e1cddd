"""Tests for the central exception handlers and the error envelope."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from common.utils import (
    ConflictException,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
)


class Body(BaseModel):
    count: int


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundException("Job not found", code="JOB_NOT_FOUND")

    @app.get("/invalid")
    async def invalid():
        raise ValidationException(errors={"email": "Valid email is required"})

    @app.get("/conflict")
    async def conflict():
        raise ConflictException("User with this email already exists", code="DUPLICATE_EMAIL")

    @app.post("/body")
    async def body(payload: Body):
        return {"count": payload.count}

    @app.get("/duplicate")
    async def duplicate():
        raise DuplicateKeyError("E11000 duplicate key error")

    @app.get("/timeout")
    async def timeout():
        raise ServerSelectionTimeoutError("no servers")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return app


@pytest.fixture
def client():
    return TestClient(_build_app(), raise_server_exceptions=False)


class TestErrorEnvelope:
    def test_api_exception(self, client):
        response = client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"message": "Job not found", "code": "JOB_NOT_FOUND"},
        }

    def test_validation_exception_carries_field_errors(self, client):
        response = client.get("/invalid")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["errors"] == {"email": "Valid email is required"}

    def test_conflict(self, client):
        response = client.get("/conflict")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "API endpoint not found"

    def test_body_validation_is_400(self, client):
        response = client.post("/body", json={"count": "many"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "count" in error["details"]["errors"]


class TestStorageErrors:
    def test_duplicate_key_is_409(self, client):
        response = client.get("/duplicate")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    def test_storage_timeout_is_503(self, client):
        response = client.get("/timeout")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"

    def test_unexpected_error_is_generic_500(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == {"message": "Internal server error", "code": "INTERNAL_ERROR"}
        assert "secret internals" not in response.text
