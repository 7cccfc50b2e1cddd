"""
FastAPI router for Careers endpoints.

Public job listings under /public; job management under /admin.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel

from common.utils import paginated_response, success_response
from powershield.dependencies import get_job_service, require_admin
from powershield.models import AdminClaims
from powershield.services.careers import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/careers", tags=["careers"])


class JobStatusRequest(BaseModel):
    status: Any = None


# ─────────────────────────────────────────────────────────────────
# Public
# ─────────────────────────────────────────────────────────────────

@router.get("/public")
async def list_public_jobs(service: Annotated[JobService, Depends(get_job_service)]):
    """Active jobs, newest first."""
    return success_response(await service.list_public_jobs())


@router.get("/public/{job_id}")
async def get_public_job(
    job_id: str,
    service: Annotated[JobService, Depends(get_job_service)],
):
    return success_response(await service.get_public_job(job_id))


# ─────────────────────────────────────────────────────────────────
# Admin
# ─────────────────────────────────────────────────────────────────

@router.get("/admin")
async def list_jobs(
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
):
    """Paginated jobs with their application counts."""
    return paginated_response(await service.list_jobs(request.query_params))


@router.get("/admin/{job_id}")
async def get_job(
    job_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
):
    return success_response(await service.get_job(job_id))


@router.post("/admin", status_code=201)
async def create_job(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
    body: Dict[str, Any] = Body(...),
):
    job = await service.create_job(body)
    return success_response(job, message="Job created successfully")


@router.put("/admin/{job_id}")
async def update_job(
    job_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
    body: Dict[str, Any] = Body(...),
):
    job = await service.update_job(job_id, body)
    return success_response(job, message="Job updated successfully")


@router.patch("/admin/{job_id}/status")
async def update_job_status(
    job_id: str,
    body: JobStatusRequest,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
):
    job = await service.update_status(job_id, body.status)
    return success_response(job, message="Job status updated successfully")


@router.delete("/admin/{job_id}")
async def delete_job(
    job_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[JobService, Depends(get_job_service)],
):
    await service.delete_job(job_id)
    return success_response(message="Job deleted successfully")


# Job management also mounted under /api/admin/careers
admin_router = APIRouter(prefix="/admin/careers", tags=["careers"])
admin_router.add_api_route("", list_jobs, methods=["GET"])
admin_router.add_api_route("", create_job, methods=["POST"], status_code=201)
admin_router.add_api_route("/{job_id}", get_job, methods=["GET"])
admin_router.add_api_route("/{job_id}", update_job, methods=["PUT"])
admin_router.add_api_route("/{job_id}/status", update_job_status, methods=["PATCH"])
admin_router.add_api_route("/{job_id}", delete_job, methods=["DELETE"])
