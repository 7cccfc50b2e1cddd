"""
FastAPI router for Gallery endpoints.

Browsing, viewing and liking are public; creating, editing and deleting
items require an admin.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel

from common.utils import ValidationException, paginated_response, success_response
from powershield.dependencies import get_gallery_service, require_admin
from powershield.models import AdminClaims
from powershield.services.gallery import GalleryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gallery", tags=["gallery"])


class LikeRequest(BaseModel):
    increment: bool = True


@router.post("", status_code=201)
async def create_gallery_item(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    body: Dict[str, Any] = Body(...),
):
    item = await service.create_item(body, uploaded_by=admin.admin_id)
    return success_response(item, message="Gallery item created successfully")


@router.get("")
async def list_gallery_items(
    request: Request,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    """
    Paginated gallery items.

    Defaults to active items; ``category`` and ``status`` filter,
    ``search`` uses the title/description text index.
    """
    return paginated_response(await service.list_items(request.query_params))


@router.get("/stats")
async def get_gallery_stats(service: Annotated[GalleryService, Depends(get_gallery_service)]):
    return success_response(await service.get_stats())


@router.get("/featured")
async def get_featured_items(
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    limit: Optional[str] = Query(None),
):
    try:
        parsed_limit = int(limit) if limit is not None else None
    except ValueError:
        parsed_limit = None

    items = await service.get_featured(parsed_limit)
    return success_response({"items": items, "count": len(items)})


@router.get("/search")
async def search_gallery_items(
    request: Request,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    q: Optional[str] = Query(None),
):
    if not q or not q.strip():
        raise ValidationException("Search term is required", errors={"q": "Search term is required"})
    return paginated_response(await service.list_items(request.query_params, search=q))


@router.get("/category/{category}")
async def list_by_category(
    category: str,
    request: Request,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    return paginated_response(await service.list_items(request.query_params, category=category))


@router.get("/{item_id}")
async def get_gallery_item(
    item_id: str,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    """Get one item; each fetch counts as a view."""
    return success_response(await service.get_item(item_id))


@router.put("/{item_id}")
async def update_gallery_item(
    item_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    body: Dict[str, Any] = Body(...),
):
    await service.update_item(item_id, body)
    return success_response(message="Gallery item updated successfully")


@router.delete("/{item_id}")
async def delete_gallery_item(
    item_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    await service.delete_item(item_id)
    return success_response(message="Gallery item deleted successfully")


@router.post("/{item_id}/like")
async def toggle_like(
    item_id: str,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    body: Optional[LikeRequest] = None,
):
    increment = body.increment if body else True
    await service.toggle_like(item_id, increment)
    return success_response(message="Like added" if increment else "Like removed")
