"""Unit tests for AdminAuthService.login."""

from unittest.mock import AsyncMock

import pytest

from common.utils.exceptions import (
    InternalServerException,
    InvalidCredentialsException,
    ValidationException,
)
from powershield.services.admin import AdminAuthService
from powershield.services.admin.credential_store import PASSWORD_HASH_FIELD


async def _seed(store, **overrides):
    data = {"username": "ops", "email": "ops@example.com", "password": "Sixchr!", "role": "admin"}
    data.update(overrides)
    return await store.create_identity(data)


class TestLoginSuccess:
    @pytest.mark.asyncio
    async def test_returns_user_and_token(self, auth_service, credential_store, token_service):
        admin = await _seed(credential_store)

        result = await auth_service.login("ops", "Sixchr!")

        assert result["user"]["id"] == admin["id"]
        assert PASSWORD_HASH_FIELD not in result["user"]
        assert result["user"]["lastLoginAt"] is not None
        assert token_service.verify(result["token"]).subject == admin["id"]

    @pytest.mark.asyncio
    async def test_login_by_email(self, auth_service, credential_store):
        await _seed(credential_store)
        result = await auth_service.login("OPS@example.com", "Sixchr!")
        assert result["user"]["username"] == "ops"

    @pytest.mark.asyncio
    async def test_records_last_login(self, auth_service, credential_store):
        admin = await _seed(credential_store)
        await auth_service.login("ops", "Sixchr!")

        stored = await credential_store.find_by_id(admin["id"])
        assert stored["lastLoginAt"] is not None


class TestLoginRejection:
    @pytest.mark.asyncio
    async def test_missing_fields(self, auth_service):
        with pytest.raises(ValidationException) as exc_info:
            await auth_service.login("", None)

        assert exc_info.value.status_code == 400
        assert set(exc_info.value.errors) == {"username", "password"}

    @pytest.mark.asyncio
    async def test_three_failure_causes_are_indistinguishable(self, auth_service, credential_store):
        await _seed(credential_store)
        inactive = await _seed(credential_store, username="gone", email="gone@example.com")
        await credential_store.update_status(inactive["id"], False)

        attempts = [("ops", "wrong-password"), ("nobody", "Sixchr!"), ("gone", "Sixchr!")]

        details = []
        for username, password in attempts:
            with pytest.raises(InvalidCredentialsException) as exc_info:
                await auth_service.login(username, password)
            details.append((exc_info.value.status_code, exc_info.value.detail))

        assert details[0] == details[1] == details[2]
        assert details[0][0] == 401

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_generic_500(self, hasher, token_service):
        store = AsyncMock()
        store.find_by_username_or_email.side_effect = KeyError("boom")
        service = AdminAuthService(store, hasher, token_service)

        with pytest.raises(InternalServerException) as exc_info:
            await service.login("ops", "Sixchr!")

        assert exc_info.value.status_code == 500
        assert "boom" not in str(exc_info.value.detail)
