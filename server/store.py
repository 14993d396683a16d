import logging
from typing import Any, Dict, List

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from errors import StoreFailure, StudentNotFound
from models.student import serialize_student

logger = logging.getLogger(__name__)


class MongoStudentStore:
    """Student records kept in one MongoDB collection, keyed by email.

    Every method maps to a single collection call. Driver errors surface as
    StoreFailure carrying the driver's message; a missing record surfaces as
    StudentNotFound. Documents are returned with ``_id`` as a string.
    """

    def __init__(self, collection):
        self.collection = collection

    async def ensure_indexes(self):
        try:
            await self.collection.create_index("email", unique=True)
        except PyMongoError as e:
            raise StoreFailure(str(e))

    async def ping(self):
        try:
            await self.collection.database.command("ping")
        except PyMongoError as e:
            raise StoreFailure(str(e))

    async def create(self, student: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(student)
        try:
            await self.collection.insert_one(document)
        except PyMongoError as e:
            raise StoreFailure(str(e))
        return serialize_student(document)

    async def list(self) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find()
            students = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreFailure(str(e))
        return [serialize_student(student) for student in students]

    async def get(self, email: str) -> Dict[str, Any]:
        try:
            student = await self.collection.find_one({"email": email})
        except PyMongoError as e:
            raise StoreFailure(str(e))
        if not student:
            raise StudentNotFound()
        return serialize_student(student)

    async def update(self, email: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not changes:
            # MongoDB rejects an empty $set; nothing to change means a plain lookup.
            return await self.get(email)
        try:
            student = await self.collection.find_one_and_update(
                {"email": email},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreFailure(str(e))
        if not student:
            raise StudentNotFound()
        return serialize_student(student)

    async def delete(self, email: str) -> Dict[str, Any]:
        try:
            student = await self.collection.find_one_and_delete({"email": email})
        except PyMongoError as e:
            raise StoreFailure(str(e))
        if not student:
            raise StudentNotFound()
        return serialize_student(student)
