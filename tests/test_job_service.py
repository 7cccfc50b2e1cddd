"""Unit tests for JobService and GalleryService."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from common.utils.exceptions import NotFoundException, ValidationException
from powershield.services.careers import JobService
from powershield.services.careers.job_service import PUBLIC_FIELDS, validate_job_data
from powershield.services.gallery import GalleryService

JOB = {
    "id": "job_1a2b3c4d",
    "title": "Engineer",
    "description": "Build things",
    "location": "Remote",
    "type": "full-time",
    "requirements": ["Python"],
    "status": "active",
    "internalNotes": "not for the public",
}


@pytest.fixture
def jobs(mock_db):
    return JobService(mock_db)


class TestValidateJobData:
    def test_required_fields(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_job_data({})
        assert exc_info.value.errors == {
            "title": "Title is required",
            "description": "Description is required",
            "location": "Location is required",
            "type": "Job type is required",
        }

    def test_requirements_must_be_list(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_job_data({**JOB, "requirements": "Python"})
        assert exc_info.value.errors == {"requirements": "Requirements must be an array"}

    def test_status(self):
        with pytest.raises(ValidationException):
            validate_job_data({**JOB, "status": "closed"})

    @pytest.mark.parametrize("status", [["active"], {"$ne": "active"}])
    def test_unhashable_status(self, status):
        with pytest.raises(ValidationException) as exc_info:
            validate_job_data({**JOB, "status": status})
        assert exc_info.value.errors == {"status": "Status must be either active or inactive"}


class TestJobService:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, jobs, mock_collection):
        payload = {k: v for k, v in JOB.items() if k not in ("id", "status", "requirements")}

        job = await jobs.create_job(payload)

        assert job["id"].startswith("job_") and len(job["id"]) == 12
        assert job["status"] == "active"
        assert job["requirements"] == []
        assert "_id" not in job

    @pytest.mark.asyncio
    async def test_public_job_hides_inactive(self, jobs, mock_collection):
        mock_collection.find_one.return_value = {**JOB, "status": "inactive"}

        with pytest.raises(NotFoundException) as exc_info:
            await jobs.get_public_job("job_1a2b3c4d")
        assert exc_info.value.code == "JOB_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_public_job_fields(self, jobs, mock_collection):
        mock_collection.find_one.return_value = JOB

        job = await jobs.get_public_job("job_1a2b3c4d")

        assert set(job) == set(PUBLIC_FIELDS)
        assert "internalNotes" not in job

    @pytest.mark.asyncio
    async def test_update_validates_merged_document(self, jobs, mock_collection):
        mock_collection.find_one.return_value = JOB

        with pytest.raises(ValidationException):
            await jobs.update_job("job_1a2b3c4d", {"title": "  "})
        mock_collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_status(self, jobs, mock_collection):
        mock_collection.find_one_and_update.return_value = {**JOB, "status": "inactive"}

        job = await jobs.update_status("job_1a2b3c4d", "inactive")
        assert job["status"] == "inactive"

        with pytest.raises(ValidationException) as exc_info:
            await jobs.update_status("job_1a2b3c4d", "paused")
        assert exc_info.value.message == "Valid status is required (active or inactive)"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "", ["active"], {"$ne": "active"}])
    async def test_update_status_rejects_non_status_values(self, jobs, mock_collection, status):
        with pytest.raises(ValidationException):
            await jobs.update_status("job_1a2b3c4d", status)
        mock_collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "", ["inactive"]])
    async def test_update_job_rejects_bad_status(self, jobs, mock_collection, status):
        mock_collection.find_one.return_value = JOB

        with pytest.raises(ValidationException) as exc_info:
            await jobs.update_job("job_1a2b3c4d", {"status": status})
        assert "status" in exc_info.value.errors
        mock_collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_admin_list_counts_applications(self, jobs, mock_collection, cursor_factory):
        mock_collection.count_documents.return_value = 1
        mock_collection.aggregate.return_value = cursor_factory([{**JOB, "applicationsCount": 4}])

        result = await jobs.list_jobs({})

        assert result.items[0]["applicationsCount"] == 4
        pipeline = mock_collection.aggregate.call_args.args[0]
        assert pipeline[-1] == {"$project": {"_id": 0, "applications": 0}}


class TestGalleryService:
    @pytest.mark.asyncio
    async def test_create_requires_title_and_image(self, mock_db):
        with pytest.raises(ValidationException) as exc_info:
            await GalleryService(mock_db).create_item({"title": "Sunset"})
        assert set(exc_info.value.errors) == {"imageUrl"}

    @pytest.mark.asyncio
    async def test_create_defaults(self, mock_db, mock_collection):
        item_id = "64b7f0c2a1b2c3d4e5f6071a"
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId(item_id))

        item = await GalleryService(mock_db).create_item(
            {"title": "Sunset", "imageUrl": "https://cdn.example.com/s.jpg", "views": 900},
            uploaded_by="admin_1a2b3c4d",
        )

        assert item["id"] == item_id
        assert item["category"] == "uncategorized"
        assert item["views"] == 0 and item["likes"] == 0
        assert item["uploadedBy"] == "admin_1a2b3c4d"

    @pytest.mark.asyncio
    async def test_get_counts_view_atomically(self, mock_db, mock_collection):
        item_id = "64b7f0c2a1b2c3d4e5f6071a"
        mock_collection.find_one_and_update.return_value = {"_id": ObjectId(item_id), "views": 3}

        item = await GalleryService(mock_db).get_item(item_id)

        update = mock_collection.find_one_and_update.call_args.args[1]
        assert update["$inc"] == {"views": 1}
        assert item["views"] == 3

    @pytest.mark.asyncio
    async def test_list_defaults_to_active(self, mock_db, mock_collection, cursor_factory):
        mock_collection.count_documents.return_value = 0
        mock_collection.find.return_value = cursor_factory([])

        await GalleryService(mock_db).list_items({}, category="landscape")

        assert mock_collection.count_documents.call_args.args[0] == {
            "status": "active",
            "category": "landscape",
        }

    @pytest.mark.asyncio
    async def test_unlike_never_goes_negative(self, mock_db, mock_collection):
        item_id = "64b7f0c2a1b2c3d4e5f6071a"
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        mock_collection.find_one.return_value = {"_id": ObjectId(item_id)}

        await GalleryService(mock_db).toggle_like(item_id, increment=False)

        query, update = mock_collection.update_one.call_args.args
        assert query == {"_id": ObjectId(item_id), "likes": {"$gt": 0}}
        assert update["$inc"] == {"likes": -1}

    @pytest.mark.asyncio
    async def test_unlike_unknown_item(self, mock_db, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundException):
            await GalleryService(mock_db).toggle_like("64b7f0c2a1b2c3d4e5f6071a", increment=False)

    @pytest.mark.asyncio
    async def test_like_is_unguarded(self, mock_db, mock_collection):
        item_id = "64b7f0c2a1b2c3d4e5f6071a"
        mock_collection.update_one.return_value = MagicMock(matched_count=1)

        await GalleryService(mock_db).toggle_like(item_id)

        query, update = mock_collection.update_one.call_args.args
        assert query == {"_id": ObjectId(item_id)}
        assert update["$inc"] == {"likes": 1}
