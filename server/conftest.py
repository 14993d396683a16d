import itertools

import pytest
from fastapi.testclient import TestClient

from errors import StoreFailure, StudentNotFound
from main import create_app


class InMemoryStudentStore:
    """Same interface as MongoStudentStore, backed by a list.

    Enforces the unique email index the way the collection does, including
    on updates that change an email.
    """

    def __init__(self):
        self.documents = []
        self.ids = itertools.count(1)
        self.available = True

    def _index(self, email):
        for i, doc in enumerate(self.documents):
            if doc.get("email") == email:
                return i
        return None

    def _check_unique(self, email, skip=None):
        for i, doc in enumerate(self.documents):
            if i != skip and doc.get("email") == email:
                raise StoreFailure(f"E11000 duplicate key error collection: studentFeedback.students index: email_1 dup key: {{ email: \"{email}\" }}")

    async def ping(self):
        if not self.available:
            raise StoreFailure("No servers found yet")

    async def create(self, student):
        self._check_unique(student.get("email"))
        document = {"_id": f"{next(self.ids):024x}", **student}
        self.documents.append(document)
        return dict(document)

    async def list(self):
        return [dict(doc) for doc in self.documents]

    async def get(self, email):
        i = self._index(email)
        if i is None:
            raise StudentNotFound()
        return dict(self.documents[i])

    async def update(self, email, changes):
        i = self._index(email)
        if i is None:
            raise StudentNotFound()
        if "email" in changes:
            self._check_unique(changes["email"], skip=i)
        self.documents[i].update(changes)
        return dict(self.documents[i])

    async def delete(self, email):
        i = self._index(email)
        if i is None:
            raise StudentNotFound()
        return self.documents.pop(i)


@pytest.fixture
def store():
    return InMemoryStudentStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))
