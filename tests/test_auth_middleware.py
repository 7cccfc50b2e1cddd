"""Unit tests for the authentication gate (AuthMiddleware.require_auth)."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from common.auth import extract_bearer_token
from common.utils.exceptions import UnauthorizedException
from powershield.middleware.auth import AuthMiddleware
from powershield.models import AdminRole


def _request(authorization=None):
    request = MagicMock()
    request.headers = {"Authorization": authorization} if authorization is not None else {}
    request.url.path = "/api/contacts"
    request.state = SimpleNamespace()
    return request


@pytest.fixture
def gate(token_service, credential_store):
    return AuthMiddleware(token_service, credential_store)


@pytest_asyncio.fixture
async def active_admin(credential_store):
    return await credential_store.create_identity(
        {"username": "ops", "email": "ops@example.com", "password": "Sixchr!", "role": "admin"}
    )


class TestExtractBearerToken:
    def test_well_formed(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
        assert extract_bearer_token("bearer abc") == "abc"

    def test_malformed(self):
        assert extract_bearer_token(None) is None
        assert extract_bearer_token("") is None
        assert extract_bearer_token("Basic abc") is None
        assert extract_bearer_token("Bearer") is None
        assert extract_bearer_token("Bearer a b") is None


class TestRequireAuth:
    @pytest.mark.asyncio
    async def test_valid_token_attaches_claims(self, gate, token_service, active_admin):
        request = _request(f"Bearer {token_service.issue(active_admin)}")

        claims = await gate.require_auth(request)

        assert claims.admin_id == active_admin["id"]
        assert claims.role is AdminRole.ADMIN
        assert request.state.admin is claims

    @pytest.mark.asyncio
    async def test_missing_and_invalid_tokens_share_one_response(self, gate, token_service, active_admin):
        expired = token_service.issue(active_admin, now=datetime.now(timezone.utc) - timedelta(days=2))
        requests = [
            _request(),
            _request("Token abc"),
            _request("Bearer not-a-jwt"),
            _request(f"Bearer {expired}"),
        ]

        details = []
        for request in requests:
            with pytest.raises(UnauthorizedException) as exc_info:
                await gate.require_auth(request)
            assert exc_info.value.status_code == 401
            details.append(exc_info.value.detail)

        assert all(d == details[0] for d in details)

    @pytest.mark.asyncio
    async def test_deactivation_takes_effect_on_next_request(
        self, gate, token_service, credential_store, active_admin
    ):
        token = token_service.issue(active_admin)
        await gate.require_auth(_request(f"Bearer {token}"))

        await credential_store.update_status(active_admin["id"], False)

        with pytest.raises(UnauthorizedException):
            await gate.require_auth(_request(f"Bearer {token}"))

    @pytest.mark.asyncio
    async def test_deleted_identity_rejected(self, gate, token_service, credential_store, active_admin):
        token = token_service.issue(active_admin)
        await credential_store.delete_identity(active_admin["id"])

        with pytest.raises(UnauthorizedException):
            await gate.require_auth(_request(f"Bearer {token}"))

    @pytest.mark.asyncio
    async def test_gate_performs_no_writes(self, gate, token_service, admin_collection, active_admin):
        before = [dict(doc) for doc in admin_collection.docs]

        await gate.require_auth(_request(f"Bearer {token_service.issue(active_admin)}"))

        assert admin_collection.docs == before
