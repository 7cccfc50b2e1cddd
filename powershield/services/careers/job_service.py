"""
Job posting service.

Jobs carry their own string id (``job_<8 hex>``). The public site only
ever sees active jobs, reduced to PUBLIC_FIELDS; admins see everything
plus the number of applications received.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from common.database import ListDefaults, ListResult, build_list_query, execute_list_query
from common.utils.exceptions import NotFoundException, ValidationException
from common.utils.validation import is_blank
from powershield.database import collections
from powershield.models import JobStatus

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = (
    "id",
    "title",
    "description",
    "location",
    "type",
    "experience",
    "requirements",
    "salary",
    "status",
    "createdAt",
)

_NO_MONGO_ID = {"_id": 0}

# Fields a client may not set directly
_SYSTEM_FIELDS = {"_id", "id", "createdAt", "updatedAt", "applicationsCount"}

# Joined onto each admin list page after skip/limit
_APPLICATIONS_COUNT_STAGES = [
    {
        "$lookup": {
            "from": collections.JOB_APPLICATIONS,
            "localField": "id",
            "foreignField": "jobId",
            "as": "applications",
        }
    },
    {"$addFields": {"applicationsCount": {"$size": "$applications"}}},
]


def new_job_id() -> str:
    return f"job_{uuid.uuid4().hex[:8]}"


def _not_found() -> NotFoundException:
    return NotFoundException("Job not found", code="JOB_NOT_FOUND")


def _as_job_status(value: Any) -> Optional[JobStatus]:
    try:
        return JobStatus(value)
    except (ValueError, TypeError):
        return None


def validate_job_data(data: Dict[str, Any]) -> None:
    """
    Check a complete job document (create, or existing merged with patch).

    Raises:
        ValidationException: With per-field messages
    """
    errors: Dict[str, str] = {}

    for field, label in (
        ("title", "Title"),
        ("description", "Description"),
        ("location", "Location"),
        ("type", "Job type"),
    ):
        if is_blank(data.get(field)):
            errors[field] = f"{label} is required"

    if data.get("status") is not None and _as_job_status(data["status"]) is None:
        errors["status"] = "Status must be either active or inactive"

    requirements = data.get("requirements")
    if requirements is not None and not isinstance(requirements, list):
        errors["requirements"] = "Requirements must be an array"

    if errors:
        raise ValidationException(errors=errors)


def to_public(job: Dict[str, Any]) -> Dict[str, Any]:
    return {field: job.get(field) for field in PUBLIC_FIELDS}


class JobService:
    """Manages the jobs collection."""

    def __init__(self, db: AsyncIOMotorDatabase, page_size: int = 20, max_page_size: int = 100):
        self._collection = db[collections.JOBS]
        self._defaults = ListDefaults(limit=page_size)
        self._max_page_size = max_page_size

    async def list_public_jobs(self) -> List[Dict[str, Any]]:
        """All active jobs, newest first, public fields only."""
        cursor = self._collection.find(
            {"status": JobStatus.ACTIVE.value}, _NO_MONGO_ID
        ).sort("createdAt", DESCENDING)
        return [to_public(job) for job in await cursor.to_list(length=None)]

    async def get_public_job(self, job_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundException: Unknown or inactive job
        """
        job = await self.find_job(job_id)
        if not job or job.get("status") != JobStatus.ACTIVE.value:
            raise _not_found()
        return to_public(job)

    async def list_jobs(self, params: Mapping[str, Any]) -> ListResult:
        """Admin listing with ``applicationsCount`` on each job."""
        query = build_list_query(
            params,
            self._defaults,
            filter_fields=("status", "type", "location"),
            max_limit=self._max_page_size,
        )
        return await execute_list_query(
            query,
            self._collection,
            text_index=True,
            projection={"_id": 0, "applications": 0},
            lookup_stages=_APPLICATIONS_COUNT_STAGES,
        )

    async def find_job(self, job_id: str) -> Optional[Dict[str, Any]]:
        return await self._collection.find_one({"id": job_id}, _NO_MONGO_ID)

    async def get_job(self, job_id: str) -> Dict[str, Any]:
        job = await self.find_job(job_id)
        if not job:
            raise _not_found()
        return job

    async def create_job(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Raises:
            ValidationException: Missing required fields, bad status or requirements
        """
        validate_job_data(data)

        now = datetime.now(timezone.utc)
        job = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
        job.update({
            "id": new_job_id(),
            "requirements": data.get("requirements") or [],
            "status": data.get("status") or JobStatus.ACTIVE.value,
            "createdAt": now,
            "updatedAt": now,
        })

        await self._collection.insert_one(job)
        job.pop("_id", None)

        logger.info(f"Created job {job['id']}: {job['title']}")
        return job

    async def update_job(self, job_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge ``data`` into the job; the merged result must still be valid.

        Raises:
            NotFoundException: Unknown job
            ValidationException: Merged job invalid
        """
        existing = await self.get_job(job_id)
        updates = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
        if "status" in updates and _as_job_status(updates["status"]) is None:
            raise ValidationException(errors={"status": "Status must be either active or inactive"})
        validate_job_data({**existing, **updates})

        updates["updatedAt"] = datetime.now(timezone.utc)
        job = await self._collection.find_one_and_update(
            {"id": job_id},
            {"$set": updates},
            projection=_NO_MONGO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if not job:
            raise _not_found()

        logger.info(f"Updated job {job_id}")
        return job

    async def update_status(self, job_id: str, status: Any) -> Dict[str, Any]:
        """
        Raises:
            ValidationException: Status not active/inactive
            NotFoundException: Unknown job
        """
        new_status = _as_job_status(status)
        if new_status is None:
            message = "Valid status is required (active or inactive)"
            raise ValidationException(message, errors={"status": message})
        status = new_status.value

        job = await self._collection.find_one_and_update(
            {"id": job_id},
            {"$set": {"status": status, "updatedAt": datetime.now(timezone.utc)}},
            projection=_NO_MONGO_ID,
            return_document=ReturnDocument.AFTER,
        )
        if not job:
            raise _not_found()

        logger.info(f"Job {job_id} status -> {status}")
        return job

    async def delete_job(self, job_id: str) -> None:
        result = await self._collection.delete_one({"id": job_id})
        if result.deleted_count == 0:
            raise _not_found()
        logger.info(f"Deleted job {job_id}")
