"""
Unit tests for the MongoDB backend.

The Motor client is replaced with mocks, so no server is needed; these
check the translation layer (ids, filters, indexes, duplicate keys).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from inkwell.storage import DuplicateKeyError
from inkwell.storage import mongo as mongo_module
from inkwell.storage.mongo import MongoMetadataStorage


class FakeCursor:
    """Records sort/skip/limit calls and yields canned documents."""

    def __init__(self, docs):
        self.docs = docs
        self.calls = []

    def sort(self, key, direction):
        self.calls.append(("sort", key, direction))
        return self

    def skip(self, n):
        self.calls.append(("skip", n))
        return self

    def limit(self, n):
        self.calls.append(("limit", n))
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


def _collection_mock() -> MagicMock:
    collection = MagicMock()
    for name in (
        "create_index",
        "insert_one",
        "find_one",
        "count_documents",
        "find_one_and_update",
        "delete_one",
        "delete_many",
    ):
        setattr(collection, name, AsyncMock())
    collection.find_one.return_value = None
    collection.find = MagicMock(return_value=FakeCursor([]))
    return collection


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections = {}

    def __getitem__(self, name: str) -> MagicMock:
        return self.collections.setdefault(name, _collection_mock())


class FakeClient:
    def __init__(self, uri: str, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.databases = {}
        self.close = MagicMock()

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase(name))


def _mongo_duplicate(details: dict | None = None, message: str = "E11000 duplicate key error"):
    return MongoDuplicateKeyError(message, 11000, details)


@pytest.fixture
def mongo(monkeypatch):
    monkeypatch.setattr(mongo_module, "AsyncIOMotorClient", FakeClient)
    return MongoMetadataStorage("mongodb://localhost:27017", "inkwell_test")


# =============================================================================
# Setup
# =============================================================================


class TestSetup:
    def test_client_is_timezone_aware(self, mongo):
        assert mongo.client.uri == "mongodb://localhost:27017"
        assert mongo.client.kwargs == {"tz_aware": True}
        assert mongo.db.name == "inkwell_test"

    @pytest.mark.asyncio
    async def test_initialize_creates_unique_indexes(self, mongo):
        await mongo.initialize()
        await mongo.initialize()

        users = mongo.db["users"].create_index
        articles = mongo.db["articles"].create_index
        assert users.await_count == 2
        users.assert_any_await([("email", ASCENDING)], unique=True)
        users.assert_any_await([("username", ASCENDING)], unique=True)
        articles.assert_awaited_once_with([("slug", ASCENDING)], unique=True)

    @pytest.mark.asyncio
    async def test_close(self, mongo):
        await mongo.close()
        mongo.client.close.assert_called_once_with()


# =============================================================================
# Documents
# =============================================================================


class TestDocuments:
    @pytest.mark.asyncio
    async def test_insert_stores_id_as_underscore_id(self, mongo):
        result = await mongo.insert("users", {"id": "user_1", "email": "a@b.co"})

        mongo.db["users"].insert_one.assert_awaited_once_with({"_id": "user_1", "email": "a@b.co"})
        assert result == {"id": "user_1", "email": "a@b.co"}

    @pytest.mark.asyncio
    async def test_get_maps_back_to_id(self, mongo):
        mongo.db["users"].find_one.return_value = {"_id": "user_1", "email": "a@b.co"}

        assert await mongo.get("users", "user_1") == {"id": "user_1", "email": "a@b.co"}
        mongo.db["users"].find_one.assert_awaited_once_with({"_id": "user_1"})

    @pytest.mark.asyncio
    async def test_get_missing(self, mongo):
        mongo.db["users"].find_one.return_value = None
        assert await mongo.get("users", "user_x") is None

    @pytest.mark.asyncio
    async def test_find_one_translates_filters(self, mongo):
        await mongo.find_one("articles", {"id": "art_1", "slug": "hi-there-abc123"})
        mongo.db["articles"].find_one.assert_awaited_once_with({"_id": "art_1", "slug": "hi-there-abc123"})

    @pytest.mark.asyncio
    async def test_list_filter_becomes_in(self, mongo):
        await mongo.count("users", {"id": ["user_1", "user_2"]})
        mongo.db["users"].count_documents.assert_awaited_once_with({"_id": {"$in": ["user_1", "user_2"]}})

    @pytest.mark.asyncio
    async def test_query_sorts_and_pages(self, mongo):
        cursor = FakeCursor([{"_id": "art_2", "title": "B"}, {"_id": "art_1", "title": "A"}])
        mongo.db["articles"].find.return_value = cursor

        docs = await mongo.query(
            "articles", {"author_id": "user_1"}, limit=2, offset=4, order_by="created_at", descending=True,
        )

        mongo.db["articles"].find.assert_called_once_with({"author_id": "user_1"})
        assert cursor.calls == [("sort", "created_at", DESCENDING), ("skip", 4), ("limit", 2)]
        assert [d["id"] for d in docs] == ["art_2", "art_1"]
        assert all("_id" not in d for d in docs)

    @pytest.mark.asyncio
    async def test_query_without_limit(self, mongo):
        cursor = FakeCursor([])
        mongo.db["articles"].find.return_value = cursor

        await mongo.query("articles", limit=None)

        mongo.db["articles"].find.assert_called_once_with({})
        assert cursor.calls == [("skip", 0)]

    @pytest.mark.asyncio
    async def test_update_returns_document_after_change(self, mongo):
        collection = mongo.db["articles"]
        collection.find_one_and_update.return_value = {"_id": "art_1", "title": "New"}

        result = await mongo.update("articles", "art_1", {"id": "ignored", "title": "New"})

        collection.find_one_and_update.assert_awaited_once_with(
            {"_id": "art_1"},
            {"$set": {"title": "New"}},
            return_document=ReturnDocument.AFTER,
        )
        assert result == {"id": "art_1", "title": "New"}

    @pytest.mark.asyncio
    async def test_update_missing(self, mongo):
        mongo.db["articles"].find_one_and_update.return_value = None
        assert await mongo.update("articles", "art_x", {"title": "New"}) is None

    @pytest.mark.asyncio
    async def test_delete(self, mongo):
        mongo.db["articles"].delete_one.return_value = MagicMock(deleted_count=1)
        assert await mongo.delete("articles", "art_1") is True

        mongo.db["articles"].delete_one.return_value = MagicMock(deleted_count=0)
        assert await mongo.delete("articles", "art_1") is False

    @pytest.mark.asyncio
    async def test_delete_many(self, mongo):
        mongo.db["articles"].delete_many.return_value = MagicMock(deleted_count=7)

        assert await mongo.delete_many("articles", {"author_id": "user_1"}) == 7
        mongo.db["articles"].delete_many.assert_awaited_once_with({"author_id": "user_1"})


# =============================================================================
# Duplicate Keys
# =============================================================================


class TestDuplicateKeys:
    def test_from_key_value(self, mongo):
        error = _mongo_duplicate({"keyValue": {"email": "a@b.co"}})
        duplicate = mongo._duplicate("users", error)

        assert (duplicate.collection, duplicate.field, duplicate.value) == ("users", "email", "a@b.co")

    def test_underscore_id_reported_as_id(self, mongo):
        duplicate = mongo._duplicate("users", _mongo_duplicate({"keyValue": {"_id": "user_1"}}))
        assert duplicate.field == "id"
        assert duplicate.value == "user_1"

    def test_from_index_name_in_errmsg(self, mongo):
        error = _mongo_duplicate({
            "errmsg": "E11000 duplicate key error collection: inkwell.articles index: slug_1 dup key",
        })
        duplicate = mongo._duplicate("articles", error)

        assert duplicate.field == "slug"
        assert duplicate.value is None

    def test_unknown_index_falls_back_to_id(self, mongo):
        duplicate = mongo._duplicate("articles", _mongo_duplicate(None, "E11000 duplicate key error"))
        assert duplicate.field == "id"

    @pytest.mark.asyncio
    async def test_insert_raises_storage_error(self, mongo):
        mongo.db["articles"].insert_one.side_effect = _mongo_duplicate({"keyValue": {"slug": "hi-abc123"}})

        with pytest.raises(DuplicateKeyError) as exc:
            await mongo.insert("articles", {"id": "art_1", "slug": "hi-abc123"})
        assert exc.value.field == "slug"
        assert isinstance(exc.value.__cause__, MongoDuplicateKeyError)

    @pytest.mark.asyncio
    async def test_update_raises_storage_error(self, mongo):
        mongo.db["users"].find_one_and_update.side_effect = _mongo_duplicate({"keyValue": {"username": "bob"}})

        with pytest.raises(DuplicateKeyError) as exc:
            await mongo.update("users", "user_1", {"username": "bob"})
        assert exc.value.field == "username"
