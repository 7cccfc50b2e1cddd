"""
FastAPI router for User endpoints.

Public user records: registration, listing, lookup and email checks.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel

from common.utils import paginated_response, success_response
from powershield.dependencies import get_user_service
from powershield.services.user import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class CheckEmailRequest(BaseModel):
    email: Optional[str] = None


@router.post("", status_code=201)
async def create_user(
    service: Annotated[UserService, Depends(get_user_service)],
    body: Dict[str, Any] = Body(...),
):
    """Create a user; any extra profile fields are stored as sent."""
    user = await service.create_user(body)
    return success_response(user, message="User created successfully")


@router.get("")
async def list_users(
    request: Request,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Paginated users (page, limit, sortBy, sortOrder, search)."""
    return paginated_response(await service.list_users(request.query_params))


@router.get("/stats")
async def get_user_stats(service: Annotated[UserService, Depends(get_user_service)]):
    return success_response(await service.get_stats())


@router.post("/check-email")
async def check_email(
    body: CheckEmailRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Whether an email is already registered."""
    exists = await service.email_exists(body.email)
    return success_response({"exists": exists})


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
):
    return success_response(await service.get_user(user_id))


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
    body: Dict[str, Any] = Body(...),
):
    await service.update_user(user_id, body)
    return success_response(message="User updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
):
    await service.delete_user(user_id)
    return success_response(message="User deleted successfully")
