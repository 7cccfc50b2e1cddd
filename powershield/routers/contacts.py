"""
FastAPI router for Contact endpoints.

The contact form posts publicly; reading and handling messages requires
an admin.
"""

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from common.utils import ValidationException, paginated_response, success_response
from powershield.dependencies import get_contact_service, require_admin
from powershield.models import AdminClaims
from powershield.services.contact import ContactService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactStatusRequest(BaseModel):
    status: Any = None


@router.post("", status_code=201)
async def create_contact(
    body: ContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    contact = await service.create_contact(body.model_dump())
    return success_response(contact, message="Contact message sent successfully")


@router.get("")
async def list_contacts(
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    """Paginated messages; ``status`` filters, ``search`` matches name/email/message."""
    return paginated_response(await service.list_contacts(request.query_params))


@router.get("/stats")
async def get_contact_stats(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    return success_response(await service.get_stats())


@router.get("/unread-count")
async def get_unread_count(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    count = await service.get_unread_count()
    return success_response({"unreadCount": count})


@router.get("/search")
async def search_contacts(
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
    q: Optional[str] = Query(None),
):
    if not q or not q.strip():
        raise ValidationException("Search term is required", errors={"q": "Search term is required"})
    return paginated_response(await service.list_contacts(request.query_params, search=q))


@router.get("/status/{status}")
async def list_by_status(
    status: str,
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    return paginated_response(await service.list_contacts(request.query_params, status=status))


@router.get("/{contact_id}")
async def get_contact(
    contact_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    """Get one message; an unread message is marked read."""
    return success_response(await service.get_contact(contact_id))


@router.put("/{contact_id}/status")
async def update_contact_status(
    contact_id: str,
    body: ContactStatusRequest,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    status = await service.update_status(contact_id, body.status)
    return success_response(message=f"Contact status updated to {status.value}")


@router.put("/{contact_id}/reply")
async def mark_replied(
    contact_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    await service.mark_replied(contact_id)
    return success_response(message="Contact marked as replied")


@router.put("/{contact_id}/archive")
async def archive_contact(
    contact_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    await service.archive(contact_id)
    return success_response(message="Contact archived successfully")


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ContactService, Depends(get_contact_service)],
):
    await service.delete_contact(contact_id)
    return success_response(message="Contact deleted successfully")
