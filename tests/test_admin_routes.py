"""Route tests for /api/admin using TestClient and dependency overrides."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from api import app
from powershield import dependencies
from powershield.middleware.auth import AuthMiddleware

SUPER = {"username": "root", "email": "root@example.com", "password": "RootPass1", "role": "super_admin"}


@pytest.fixture
def client(credential_store, auth_service, token_service):
    gate = AuthMiddleware(token_service, credential_store)

    app.dependency_overrides[dependencies.get_credential_store] = lambda: credential_store
    app.dependency_overrides[dependencies.get_admin_auth_service] = lambda: auth_service
    app.dependency_overrides[dependencies.get_auth_middleware] = lambda: gate

    asyncio.run(credential_store.create_identity(dict(SUPER)))

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


def _login(client, username, password):
    return client.post("/api/admin/login", json={"username": username, "password": password})


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


class TestLoginRoute:
    def test_login_success(self, client):
        response = _login(client, "root", "RootPass1")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["token"]
        assert "hashedPassword" not in body["data"]["user"]

    def test_missing_fields_are_400(self, client):
        response = client.post("/api/admin/login", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_failed_logins_share_one_body(self, client):
        token = _login(client, "root", "RootPass1").json()["data"]["token"]
        created = client.post(
            "/api/admin",
            json={"username": "gone", "email": "gone@example.com", "password": "Sixchr!"},
            headers=_auth(token),
        ).json()["data"]
        client.patch(f"/api/admin/{created['id']}/status", json={"isActive": False}, headers=_auth(token))

        wrong_password = _login(client, "root", "nope-nope")
        unknown_user = _login(client, "nobody", "RootPass1")
        deactivated = _login(client, "gone", "Sixchr!")

        assert wrong_password.status_code == unknown_user.status_code == deactivated.status_code == 401
        assert wrong_password.json() == unknown_user.json() == deactivated.json()


class TestGatedRoutes:
    def test_no_token_is_401(self, client):
        response = client.get("/api/admin/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_me(self, client):
        token = _login(client, "root", "RootPass1").json()["data"]["token"]
        response = client.get("/api/admin/me", headers=_auth(token))

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "root"

    def test_status_requires_boolean(self, client):
        token = _login(client, "root", "RootPass1").json()["data"]["token"]
        me = client.get("/api/admin/me", headers=_auth(token)).json()["data"]

        response = client.patch(f"/api/admin/{me['id']}/status", json={"isActive": "yes"}, headers=_auth(token))

        assert response.status_code == 400

    def test_duplicate_admin_is_409(self, client):
        token = _login(client, "root", "RootPass1").json()["data"]["token"]
        payload = {"username": "root", "email": "other@example.com", "password": "Sixchr!"}

        response = client.post("/api/admin", json=payload, headers=_auth(token))

        assert response.status_code == 409
        assert response.json()["success"] is False


class TestScenarioPlainAdmin:
    def test_plain_admin_blocked_from_super_admin_routes(self, client):
        root_token = _login(client, "root", "RootPass1").json()["data"]["token"]

        created = client.post(
            "/api/admin",
            json={"username": "ops", "email": "ops@example.com", "password": "Sixchr!", "role": "admin"},
            headers=_auth(root_token),
        )
        assert created.status_code == 201
        ops_id = created.json()["data"]["id"]

        ops_token = _login(client, "ops", "Sixchr!").json()["data"]["token"]

        # Gated but not role-restricted
        assert client.get("/api/admin", headers=_auth(ops_token)).status_code == 200

        # super_admin only
        responses = [
            client.post(
                "/api/admin",
                json={"username": "x1", "email": "x1@example.com", "password": "Sixchr!"},
                headers=_auth(ops_token),
            ),
            client.patch(f"/api/admin/{ops_id}/status", json={"isActive": False}, headers=_auth(ops_token)),
            client.delete(f"/api/admin/{ops_id}", headers=_auth(ops_token)),
        ]
        for response in responses:
            assert response.status_code == 403
            assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_plain_admin_cannot_promote_self(self, client):
        root_token = _login(client, "root", "RootPass1").json()["data"]["token"]
        ops_id = client.post(
            "/api/admin",
            json={"username": "ops", "email": "ops@example.com", "password": "Sixchr!"},
            headers=_auth(root_token),
        ).json()["data"]["id"]
        ops_token = _login(client, "ops", "Sixchr!").json()["data"]["token"]

        response = client.put(f"/api/admin/{ops_id}", json={"role": "super_admin"}, headers=_auth(ops_token))
        assert response.status_code == 403

        response = client.put(f"/api/admin/{ops_id}", json={"username": "ops-renamed"}, headers=_auth(ops_token))
        assert response.status_code == 200
        assert response.json()["data"]["username"] == "ops-renamed"

    def test_deactivated_admin_locked_out_immediately(self, client):
        root_token = _login(client, "root", "RootPass1").json()["data"]["token"]
        ops_id = client.post(
            "/api/admin",
            json={"username": "ops", "email": "ops@example.com", "password": "Sixchr!"},
            headers=_auth(root_token),
        ).json()["data"]["id"]
        ops_token = _login(client, "ops", "Sixchr!").json()["data"]["token"]
        assert client.get("/api/admin/me", headers=_auth(ops_token)).status_code == 200

        client.patch(f"/api/admin/{ops_id}/status", json={"isActive": False}, headers=_auth(root_token))

        assert client.get("/api/admin/me", headers=_auth(ops_token)).status_code == 401
