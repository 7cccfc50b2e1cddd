"""
FastAPI router for Admin endpoints.

Provides admin login and admin-user management. Login is public; every
other route requires an active admin, and provisioning, status changes
and deletion additionally require super_admin.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StrictBool

from common.utils import ForbiddenException, NotFoundException, success_response
from powershield.dependencies import (
    get_admin_auth_service,
    get_credential_store,
    require_admin,
    require_super_admin,
)
from powershield.models import AdminClaims, AdminRole
from powershield.services.admin import AdminAuthService, CredentialStore, validate_admin_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# Request schemas
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminCreateRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    isActive: Optional[bool] = None


class AdminUpdateRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class AdminStatusRequest(BaseModel):
    isActive: StrictBool


def _admin_not_found() -> NotFoundException:
    return NotFoundException("Admin user not found", code="ADMIN_NOT_FOUND")


@router.post("/login")
async def login(
    body: LoginRequest,
    auth_service: Annotated[AdminAuthService, Depends(get_admin_auth_service)],
):
    """
    Exchange username (or email) and password for a bearer token.

    Unknown user, deactivated account and wrong password all produce the
    same 401 response.
    """
    result = await auth_service.login(body.username, body.password)
    return success_response(result, message="Login successful")


@router.get("/me")
async def get_current_admin(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Get the identity behind the presented token."""
    identity = await store.find_by_id(admin.admin_id)
    if not identity:
        raise _admin_not_found()
    return success_response(identity)


@router.get("")
async def list_admins(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    role: Optional[str] = Query(None),
    is_active: Optional[str] = Query(None, alias="isActive"),
):
    """List admin identities, newest first, optionally by role and status."""
    query = {}
    if role:
        query["role"] = role
    if is_active is not None:
        query["isActive"] = is_active == "true"

    return success_response(await store.list_identities(query))


@router.post("", status_code=201)
async def create_admin(
    body: AdminCreateRequest,
    admin: Annotated[AdminClaims, Depends(require_super_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Provision a new admin identity (super_admin only)."""
    data = body.model_dump(exclude_none=True)
    validate_admin_data(data)

    identity = await store.create_identity(data)
    logger.info(f"Admin {identity['id']} provisioned by {admin.admin_id}")

    return success_response(identity, message="Admin user created successfully")


@router.get("/{admin_id}")
async def get_admin(
    admin_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Get one admin identity."""
    identity = await store.find_by_id(admin_id)
    if not identity:
        raise _admin_not_found()
    return success_response(identity)


@router.put("/{admin_id}")
async def update_admin(
    admin_id: str,
    body: AdminUpdateRequest,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """
    Update username, email, password or role.

    A plain admin may only edit their own record and may not change any
    role; super_admin may edit anyone.
    """
    is_super = admin.role.satisfies(AdminRole.SUPER_ADMIN)
    data = body.model_dump(exclude_none=True)

    if not is_super and (admin_id != admin.admin_id or "role" in data):
        raise ForbiddenException(
            message="Access denied. Super admin privileges required.",
            code="FORBIDDEN",
        )

    validate_admin_data(data, partial=True)
    identity = await store.update_identity(admin_id, data)

    return success_response(identity, message="Admin user updated successfully")


@router.patch("/{admin_id}/status")
async def update_admin_status(
    admin_id: str,
    body: AdminStatusRequest,
    admin: Annotated[AdminClaims, Depends(require_super_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Activate or deactivate an admin (super_admin only); takes effect on their next request."""
    identity = await store.update_status(admin_id, body.isActive)
    return success_response(identity, message="Admin user status updated successfully")


@router.delete("/{admin_id}")
async def delete_admin(
    admin_id: str,
    admin: Annotated[AdminClaims, Depends(require_super_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Permanently delete an admin (super_admin only)."""
    await store.delete_identity(admin_id)
    logger.info(f"Admin {admin_id} deleted by {admin.admin_id}")
    return success_response(message="Admin user deleted successfully")
