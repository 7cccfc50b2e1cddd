"""Shared test fixtures for PowerShield backend tests."""

import copy
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from common.auth import PasswordHasher, TokenService
from powershield.services.admin import AdminAuthService, CredentialStore

TEST_SECRET = "test-signing-secret"


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and aggregate() return cursors synchronously (not
    # coroutines), so use MagicMock for them. Async methods like find_one,
    # insert_one, count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    collection.aggregate = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


def make_cursor(documents):
    """A Motor-like cursor whose chainable methods return itself."""
    cursor = MagicMock()
    cursor.sort = MagicMock(return_value=cursor)
    cursor.skip = MagicMock(return_value=cursor)
    cursor.limit = MagicMock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


# ─────────────────────────────────────────────────────────────────
# In-memory admin_users collection
# ─────────────────────────────────────────────────────────────────


def _matches(doc, query):
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in expected):
                return False
        elif doc.get(key) != expected:
            return False
    return True


def _project(doc, projection):
    if doc is None:
        return None
    result = copy.deepcopy(doc)
    for key, flag in (projection or {}).items():
        if flag == 0:
            result.pop(key, None)
    return result


class FakeAdminCollection:
    """
    Enough of a Motor collection for the credential store, including the
    unique id/username/email indexes.
    """

    UNIQUE_FIELDS = ("id", "username", "email")

    def __init__(self):
        self.docs = []
        self._next_id = 1

    def _check_unique(self, candidate, ignore=None):
        for doc in self.docs:
            if doc is ignore:
                continue
            for field in self.UNIQUE_FIELDS:
                if field in candidate and doc.get(field) == candidate[field]:
                    raise DuplicateKeyError(f"E11000 duplicate key error: {field}")

    async def insert_one(self, doc):
        self._check_unique(doc)
        doc["_id"] = self._next_id
        self._next_id += 1
        self.docs.append(copy.deepcopy(doc))
        result = MagicMock()
        result.inserted_id = doc["_id"]
        return result

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        for doc in self.docs:
            if _matches(doc, query):
                changes = update.get("$set", {})
                self._check_unique(changes, ignore=doc)
                doc.update(copy.deepcopy(changes))
                return _project(doc, projection)
        return None

    async def update_one(self, query, update):
        result = MagicMock()
        result.matched_count = 0
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                result.matched_count = 1
                break
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for doc in list(self.docs):
            if _matches(doc, query):
                self.docs.remove(doc)
                result.deleted_count = 1
                break
        return result

    async def count_documents(self, query):
        return sum(1 for doc in self.docs if _matches(doc, query))

    def find(self, query=None, projection=None):
        docs = [_project(doc, projection) for doc in self.docs if _matches(doc, query or {})]
        docs.reverse()
        return make_cursor(docs)


@pytest.fixture
def admin_collection():
    return FakeAdminCollection()


@pytest.fixture
def admin_db(admin_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=admin_collection)
    return db


@pytest.fixture
def hasher():
    # Minimum cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def credential_store(admin_db, hasher):
    return CredentialStore(admin_db, hasher)


@pytest.fixture
def auth_service(credential_store, hasher, token_service):
    return AdminAuthService(credential_store, hasher, token_service)


@pytest.fixture
def cursor_factory():
    return make_cursor
