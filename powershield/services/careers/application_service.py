"""
Job application service.

Applications are submitted from the public careers page and reviewed by
admins. A person can apply to a given job once; the unique (jobId, email)
index settles concurrent duplicate submissions.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from common.database import ListDefaults, ListResult, build_list_query, execute_list_query
from common.utils.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from common.utils.validation import is_blank, require_fields, validate_email
from powershield.database import collections
from powershield.models import ApplicationStatus, JobStatus, status_values
from powershield.services.careers.job_service import JobService

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("firstName", "lastName", "email", "position")

REQUIRED_FIELDS = ["jobId", "firstName", "lastName", "email", "phone", "address", "position"]
FIELD_LABELS = {
    "jobId": "Job ID",
    "firstName": "First name",
    "lastName": "Last name",
    "phone": "Phone number",
}

# Fields copied from a submission
APPLICATION_FIELDS = (
    "jobId",
    "firstName",
    "lastName",
    "email",
    "phone",
    "address",
    "position",
    "linkedinUrl",
    "coverLetter",
)

_NO_MONGO_ID = {"_id": 0}

_SYSTEM_FIELDS = {"_id", "id", "createdAt", "updatedAt", "reviewedAt", "jobDetails"}

# Attach the job each application belongs to
_JOB_DETAILS_STAGES = [
    {
        "$lookup": {
            "from": collections.JOBS,
            "localField": "jobId",
            "foreignField": "id",
            "as": "jobDetails",
        }
    },
    {"$addFields": {"jobDetails": {"$arrayElemAt": ["$jobDetails", 0]}}},
    {"$project": {"_id": 0, "jobDetails._id": 0}},
]


def new_application_id() -> str:
    return f"app_{uuid.uuid4().hex[:8]}"


def _not_found() -> NotFoundException:
    return NotFoundException("Application not found", code="APPLICATION_NOT_FOUND")


def _is_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def _as_application_status(value: Any) -> Optional[ApplicationStatus]:
    try:
        return ApplicationStatus(value)
    except (ValueError, TypeError):
        return None


def validate_application_data(data: Dict[str, Any]) -> None:
    """
    Check a complete application (submission, or existing merged with patch).

    Raises:
        ValidationException: With per-field messages
    """
    errors = require_fields(data, REQUIRED_FIELDS, FIELD_LABELS)

    if "email" not in errors and not validate_email(data.get("email")):
        errors["email"] = "Valid email is required"

    if data.get("status") is not None and _as_application_status(data["status"]) is None:
        errors["status"] = f"Status must be one of: {status_values(ApplicationStatus)}"

    linkedin = data.get("linkedinUrl")
    if not is_blank(linkedin) and not _is_url(linkedin):
        errors["linkedinUrl"] = "LinkedIn URL must be a valid URL"

    if errors:
        raise ValidationException(errors=errors)


def parse_application_status(value: Any) -> ApplicationStatus:
    """
    Raises:
        ValidationException: Not one of the application statuses
    """
    status = _as_application_status(value)
    if status is None:
        message = f"Valid status is required ({status_values(ApplicationStatus)})"
        raise ValidationException(message, errors={"status": message})
    return status


class ApplicationService:
    """Manages the job_applications collection."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        job_service: JobService,
        page_size: int = 20,
        max_page_size: int = 100,
    ):
        self._collection = db[collections.JOB_APPLICATIONS]
        self._jobs = job_service
        self._defaults = ListDefaults(limit=page_size)
        self._max_page_size = max_page_size

    async def submit_application(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit an application to an open job.

        Raises:
            ValidationException: Missing or malformed fields
            NotFoundException: Unknown job
            BadRequestException: Job no longer active
            ConflictException: Same email already applied to this job
        """
        validate_application_data(data)

        job = await self._jobs.find_job(data["jobId"].strip())
        if not job:
            raise NotFoundException("Job not found", code="JOB_NOT_FOUND")
        if job.get("status") != JobStatus.ACTIVE.value:
            raise BadRequestException(
                "This job is no longer accepting applications",
                code="JOB_NOT_ACTIVE",
            )

        now = datetime.now(timezone.utc)
        application = {field: data.get(field) for field in APPLICATION_FIELDS}
        application.update({
            "id": new_application_id(),
            "jobId": job["id"],
            "email": data["email"].strip().lower(),
            "status": ApplicationStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
            "reviewedAt": None,
        })

        try:
            await self._collection.insert_one(application)
        except DuplicateKeyError:
            raise ConflictException(
                "You have already applied for this job",
                code="DUPLICATE_APPLICATION",
            ) from None

        application.pop("_id", None)
        application.pop("reviewedAt")

        logger.info(f"Application {application['id']} submitted for job {job['id']}")
        return application

    async def list_applications(self, params: Mapping[str, Any], **overrides: Any) -> ListResult:
        """Paginated listing with ``jobDetails`` joined onto each item."""
        merged = {**params, **overrides}
        if merged.get("status"):
            parse_application_status(merged["status"])

        query = build_list_query(
            merged,
            self._defaults,
            filter_fields=("jobId", "status"),
            max_limit=self._max_page_size,
        )
        return await execute_list_query(
            query,
            self._collection,
            search_fields=SEARCH_FIELDS,
            lookup_stages=_JOB_DETAILS_STAGES,
        )

    async def list_by_job(self, job_id: str) -> Dict[str, Any]:
        """
        Every application for one job, newest first.

        Raises:
            NotFoundException: Unknown job
        """
        job = await self._jobs.get_job(job_id)
        cursor = self._collection.find({"jobId": job_id}, _NO_MONGO_ID).sort("createdAt", DESCENDING)
        return {"applications": await cursor.to_list(length=None), "jobDetails": job}

    async def get_application(self, application_id: str) -> Dict[str, Any]:
        application = await self._find(application_id)
        if not application:
            raise _not_found()
        return application

    async def update_application(self, application_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge ``data`` into the application; the result must still be valid.

        Raises:
            NotFoundException: Unknown application
            ValidationException: Merged application invalid
        """
        existing = await self.get_application(application_id)
        updates = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
        new_status = parse_application_status(updates["status"]) if "status" in updates else None
        validate_application_data({**existing, **updates})

        if "email" in updates:
            updates["email"] = updates["email"].strip().lower()
        if new_status is not None:
            updates["status"] = new_status.value
            updates["reviewedAt"] = self._reviewed_at(new_status)
        updates["updatedAt"] = datetime.now(timezone.utc)

        try:
            result = await self._collection.update_one({"id": application_id}, {"$set": updates})
        except DuplicateKeyError:
            raise ConflictException(
                "This email has already applied for this job",
                code="DUPLICATE_APPLICATION",
            ) from None
        if result.matched_count == 0:
            raise _not_found()

        logger.info(f"Updated application {application_id}")
        return await self.get_application(application_id)

    async def update_status(self, application_id: str, status: Any) -> Dict[str, Any]:
        """
        Move an application through review.

        Any status other than pending stamps ``reviewedAt``; returning to
        pending clears it.

        Raises:
            ValidationException: Unknown status
            NotFoundException: Unknown application
        """
        new_status = parse_application_status(status)
        now = datetime.now(timezone.utc)

        result = await self._collection.update_one(
            {"id": application_id},
            {"$set": {
                "status": new_status.value,
                "updatedAt": now,
                "reviewedAt": self._reviewed_at(new_status, now),
            }},
        )
        if result.matched_count == 0:
            raise _not_found()

        logger.info(f"Application {application_id} status -> {new_status.value}")
        return await self.get_application(application_id)

    async def delete_application(self, application_id: str) -> None:
        result = await self._collection.delete_one({"id": application_id})
        if result.deleted_count == 0:
            raise _not_found()
        logger.info(f"Deleted application {application_id}")

    async def get_statistics(self, job_id: Optional[str] = None) -> Dict[str, int]:
        """Application count per status, optionally for one job."""
        match = {"jobId": job_id} if job_id else {}
        rows = await self._collection.aggregate([
            {"$match": match},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        ]).to_list(length=None)

        stats = {s.value: 0 for s in ApplicationStatus}
        for row in rows:
            stats[str(row["_id"])] = row["count"]
        return stats

    async def get_grouped_by_job(self) -> List[Dict[str, Any]]:
        """Applications grouped per job, each group with status counts."""

        def count_status(status: ApplicationStatus) -> Dict[str, Any]:
            return {"$sum": {"$cond": [{"$eq": ["$status", status.value]}, 1, 0]}}

        pipeline = [
            {"$sort": {"createdAt": DESCENDING}},
            {"$project": {"_id": 0}},
            {
                "$group": {
                    "_id": "$jobId",
                    "applications": {"$push": "$$ROOT"},
                    "total": {"$sum": 1},
                    **{f"{s.value}Count": count_status(s) for s in ApplicationStatus},
                }
            },
            {
                "$lookup": {
                    "from": collections.JOBS,
                    "localField": "_id",
                    "foreignField": "id",
                    "as": "jobDetails",
                }
            },
            {
                "$project": {
                    "_id": 0,
                    "jobId": "$_id",
                    "jobDetails": {"$arrayElemAt": ["$jobDetails", 0]},
                    "applications": 1,
                    "statistics": {
                        "total": "$total",
                        **{s.value: f"${s.value}Count" for s in ApplicationStatus},
                    },
                }
            },
            {"$project": {"jobDetails._id": 0}},
            {"$sort": {"jobDetails.createdAt": DESCENDING}},
        ]
        return await self._collection.aggregate(pipeline).to_list(length=None)

    async def _find(self, application_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._collection.aggregate([
            {"$match": {"id": application_id}},
            *_JOB_DETAILS_STAGES,
        ]).to_list(length=1)
        return rows[0] if rows else None

    @staticmethod
    def _reviewed_at(status: ApplicationStatus, now: Optional[datetime] = None) -> Optional[datetime]:
        if status is ApplicationStatus.PENDING:
            return None
        return now or datetime.now(timezone.utc)
