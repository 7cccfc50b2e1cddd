"""Unit tests for ContactService."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from common.utils.exceptions import NotFoundException, ValidationException
from powershield.services.contact import ContactService

CONTACT_ID = "64b7f0c2a1b2c3d4e5f60718"


@pytest.fixture
def service(mock_db):
    return ContactService(mock_db)


class TestCreateContact:
    @pytest.mark.asyncio
    async def test_stores_unread_and_acknowledges(self, service, mock_collection):
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId(CONTACT_ID))

        ack = await service.create_contact(
            {"name": " Ada ", "email": "Ada@Example.com", "message": "Hello"}
        )

        assert set(ack) == {"id", "name", "email", "createdAt"}
        assert ack["id"] == CONTACT_ID
        assert ack["email"] == "ada@example.com"

        stored = mock_collection.insert_one.call_args.args[0]
        assert stored["status"] == "unread"
        assert stored["name"] == "Ada"

    @pytest.mark.asyncio
    async def test_invalid_email(self, service, mock_collection):
        with pytest.raises(ValidationException) as exc_info:
            await service.create_contact({"name": "Ada", "email": "not-an-email"})

        assert exc_info.value.errors == {"email": "Valid email address is required"}
        mock_collection.insert_one.assert_not_called()


class TestGetContact:
    @pytest.mark.asyncio
    async def test_unread_is_marked_read(self, service, mock_collection):
        oid = ObjectId(CONTACT_ID)
        mock_collection.find_one_and_update.return_value = {"_id": oid, "status": "read"}

        contact = await service.get_contact(CONTACT_ID)

        query, update = mock_collection.find_one_and_update.call_args.args
        assert query == {"_id": oid, "status": "unread"}
        assert update["$set"]["status"] == "read"
        assert contact == {"id": CONTACT_ID, "status": "read"}
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_handled_is_left_alone(self, service, mock_collection):
        mock_collection.find_one_and_update.return_value = None
        mock_collection.find_one.return_value = {"_id": ObjectId(CONTACT_ID), "status": "replied"}

        contact = await service.get_contact(CONTACT_ID)

        assert contact["status"] == "replied"

    @pytest.mark.asyncio
    async def test_malformed_id_is_404(self, service, mock_collection):
        with pytest.raises(NotFoundException):
            await service.get_contact("nope")
        mock_collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, service, mock_collection):
        mock_collection.find_one_and_update.return_value = None
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.get_contact(CONTACT_ID)
        assert exc_info.value.code == "CONTACT_NOT_FOUND"


class TestStatus:
    @pytest.mark.asyncio
    async def test_invalid_status_lists_allowed_values(self, service, mock_collection):
        with pytest.raises(ValidationException) as exc_info:
            await service.update_status(CONTACT_ID, "spam")

        assert exc_info.value.message == "Invalid status. Must be one of: unread, read, replied, archived"
        mock_collection.update_one.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, ["read"], {"$ne": "read"}])
    async def test_non_string_status_is_400(self, service, mock_collection, status):
        with pytest.raises(ValidationException):
            await service.update_status(CONTACT_ID, status)
        mock_collection.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_archive(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)

        await service.archive(CONTACT_ID)

        assert mock_collection.update_one.call_args.args[1]["$set"]["status"] == "archived"

    @pytest.mark.asyncio
    async def test_unchanged_status_still_succeeds(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=1, modified_count=0)
        await service.mark_replied(CONTACT_ID)

    @pytest.mark.asyncio
    async def test_unknown_contact(self, service, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        with pytest.raises(NotFoundException):
            await service.update_status(CONTACT_ID, "read")

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, service):
        with pytest.raises(ValidationException):
            await service.list_contacts({}, status="spam")


class TestStats:
    @pytest.mark.asyncio
    async def test_breakdown_covers_every_status(self, service, mock_collection, cursor_factory):
        mock_collection.count_documents.side_effect = [9, 2]
        mock_collection.aggregate.return_value = cursor_factory(
            [{"_id": "unread", "count": 4}, {"_id": "read", "count": 5}]
        )

        stats = await service.get_stats()

        assert stats["totalCount"] == 9
        assert stats["recentContacts"] == 2
        assert stats["statusBreakdown"] == {"unread": 4, "read": 5, "replied": 0, "archived": 0}
