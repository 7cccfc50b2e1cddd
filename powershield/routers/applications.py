"""
FastAPI router for Job Application endpoints.

Applicants submit publicly; every other route requires an admin.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel

from common.utils import paginated_response, success_response
from powershield.dependencies import get_application_service, require_admin
from powershield.models import AdminClaims
from powershield.services.careers import ApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-applications", tags=["job-applications"])


class ApplicationRequest(BaseModel):
    jobId: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    position: Optional[str] = None
    linkedinUrl: Optional[str] = None
    coverLetter: Optional[str] = None


class ApplicationStatusRequest(BaseModel):
    status: Any = None


@router.post("", status_code=201)
async def submit_application(
    body: ApplicationRequest,
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    application = await service.submit_application(body.model_dump())
    return success_response(application, message="Application submitted successfully")


@router.get("")
async def list_applications(
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    """Paginated applications; ``jobId``/``status`` filter, ``search`` matches name/email/position."""
    return paginated_response(await service.list_applications(request.query_params))


@router.get("/grouped-by-job")
async def get_grouped_by_job(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    return success_response(await service.get_grouped_by_job())


@router.get("/statistics")
async def get_statistics(
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
    job_id: Optional[str] = Query(None, alias="jobId"),
):
    return success_response(await service.get_statistics(job_id))


@router.get("/job/{job_id}")
async def list_by_job(
    job_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    return success_response(await service.list_by_job(job_id))


@router.get("/status/{status}")
async def list_by_status(
    status: str,
    request: Request,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    return paginated_response(await service.list_applications(request.query_params, status=status))


@router.get("/{application_id}")
async def get_application(
    application_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    return success_response(await service.get_application(application_id))


@router.put("/{application_id}")
async def update_application(
    application_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
    body: Dict[str, Any] = Body(...),
):
    application = await service.update_application(application_id, body)
    return success_response(application, message="Application updated successfully")


@router.patch("/{application_id}/status")
async def update_application_status(
    application_id: str,
    body: ApplicationStatusRequest,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    application = await service.update_status(application_id, body.status)
    return success_response(application, message="Application status updated successfully")


@router.delete("/{application_id}")
async def delete_application(
    application_id: str,
    admin: Annotated[AdminClaims, Depends(require_admin)],
    service: Annotated[ApplicationService, Depends(get_application_service)],
):
    await service.delete_application(application_id)
    return success_response(message="Application deleted successfully")


# Application management also mounted under /api/admin/job-applications;
# fixed paths come before /{application_id}
admin_router = APIRouter(prefix="/admin/job-applications", tags=["job-applications"])
admin_router.add_api_route("", list_applications, methods=["GET"])
admin_router.add_api_route("/grouped-by-job", get_grouped_by_job, methods=["GET"])
admin_router.add_api_route("/statistics", get_statistics, methods=["GET"])
admin_router.add_api_route("/job/{job_id}", list_by_job, methods=["GET"])
admin_router.add_api_route("/status/{status}", list_by_status, methods=["GET"])
admin_router.add_api_route("/{application_id}", get_application, methods=["GET"])
admin_router.add_api_route("/{application_id}", update_application, methods=["PUT"])
admin_router.add_api_route("/{application_id}/status", update_application_status, methods=["PATCH"])
admin_router.add_api_route("/{application_id}", delete_application, methods=["DELETE"])
