"""Unit tests for the MongoDB-backed student store."""

import pytest
from unittest.mock import AsyncMock, Mock
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from errors import StoreFailure, StudentNotFound
from store import MongoStudentStore

ANN = {"fullName": "Ann Lee", "email": "ann@x.edu", "year": 2, "semester": 1}


def make_collection():
    collection = Mock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    collection.create_index = AsyncMock()
    collection.database.command = AsyncMock()
    return collection


class TestMongoStudentStore:
    @pytest.mark.asyncio
    async def test_ensure_indexes_makes_email_unique(self):
        collection = make_collection()

        await MongoStudentStore(collection).ensure_indexes()

        collection.create_index.assert_awaited_once_with("email", unique=True)

    @pytest.mark.asyncio
    async def test_create_returns_document_with_string_id(self):
        collection = make_collection()
        oid = ObjectId()

        def assign_id(document):
            document["_id"] = oid

        collection.insert_one.side_effect = assign_id
        store = MongoStudentStore(collection)

        created = await store.create(ANN)

        assert created == {**ANN, "_id": str(oid)}
        assert "_id" not in ANN

    @pytest.mark.asyncio
    async def test_create_duplicate_raises_store_failure(self):
        collection = make_collection()
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")
        store = MongoStudentStore(collection)

        with pytest.raises(StoreFailure, match="E11000 duplicate key error"):
            await store.create(ANN)

    @pytest.mark.asyncio
    async def test_list_returns_every_document(self):
        collection = make_collection()
        oid = ObjectId()
        cursor = Mock()
        cursor.to_list = AsyncMock(return_value=[{**ANN, "_id": oid}])
        collection.find.return_value = cursor
        store = MongoStudentStore(collection)

        students = await store.list()

        assert students == [{**ANN, "_id": str(oid)}]
        collection.find.assert_called_once_with()
        cursor.to_list.assert_awaited_once_with(length=None)

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self):
        collection = make_collection()
        collection.find_one.return_value = None
        store = MongoStudentStore(collection)

        with pytest.raises(StudentNotFound, match="Student not found"):
            await store.get("nobody@x.edu")

        collection.find_one.assert_awaited_once_with({"email": "nobody@x.edu"})

    @pytest.mark.asyncio
    async def test_update_sets_changes_and_returns_new_document(self):
        collection = make_collection()
        oid = ObjectId()
        collection.find_one_and_update.return_value = {**ANN, "year": 3, "_id": oid}
        store = MongoStudentStore(collection)

        updated = await store.update("ann@x.edu", {"year": 3})

        assert updated["year"] == 3
        assert updated["_id"] == str(oid)
        collection.find_one_and_update.assert_awaited_once_with(
            {"email": "ann@x.edu"},
            {"$set": {"year": 3}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_update_with_no_changes_is_a_lookup(self):
        collection = make_collection()
        collection.find_one.return_value = {**ANN, "_id": ObjectId()}
        store = MongoStudentStore(collection)

        student = await store.update("ann@x.edu", {})

        assert student["email"] == "ann@x.edu"
        collection.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self):
        collection = make_collection()
        collection.find_one_and_update.return_value = None
        store = MongoStudentStore(collection)

        with pytest.raises(StudentNotFound):
            await store.update("nobody@x.edu", {"year": 3})

    @pytest.mark.asyncio
    async def test_delete_returns_prior_document(self):
        collection = make_collection()
        oid = ObjectId()
        collection.find_one_and_delete.return_value = {**ANN, "_id": oid}
        store = MongoStudentStore(collection)

        deleted = await store.delete("ann@x.edu")

        assert deleted == {**ANN, "_id": str(oid)}
        collection.find_one_and_delete.assert_awaited_once_with({"email": "ann@x.edu"})

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self):
        collection = make_collection()
        collection.find_one_and_delete.return_value = None
        store = MongoStudentStore(collection)

        with pytest.raises(StudentNotFound):
            await store.delete("nobody@x.edu")

    @pytest.mark.asyncio
    async def test_driver_errors_become_store_failures(self):
        collection = make_collection()
        collection.find_one.side_effect = ServerSelectionTimeoutError("localhost:27017: connection refused")
        store = MongoStudentStore(collection)

        with pytest.raises(StoreFailure, match="connection refused"):
            await store.get("ann@x.edu")

    @pytest.mark.asyncio
    async def test_ping(self):
        collection = make_collection()
        store = MongoStudentStore(collection)

        await store.ping()

        collection.database.command.assert_awaited_once_with("ping")
