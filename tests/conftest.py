"""Shared fixtures: an in-memory stand-in for the MongoDB collections the core talks to."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError

from core.activity_logger import ActivityLogger
from core.chat_log_manager import ChatLogManager
from core.field_data_service import FieldDataService
from core.models import FieldRecord, Session
from core.record_store import RecordStore


def _matches(doc, query):
    for key, expected in query.items():
        actual = doc.get(key)
        if isinstance(expected, dict) and "$gte" in expected:
            if actual is None or actual < expected["$gte"]:
                return False
        elif actual != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.unique_keys = []

    def create_index(self, key, unique=False):
        if unique:
            self.unique_keys.append(key)

    def insert_one(self, doc):
        for key in self.unique_keys:
            if any(d.get(key) == doc.get(key) for d in self.docs):
                raise DuplicateKeyError(f"duplicate {key}")
        self.docs.append(dict(doc))

    def insert_many(self, docs):
        for doc in docs:
            self.insert_one(doc)

    def find(self, query, projection=None):
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)])

    def find_one(self, query, projection=None):
        return next((dict(d) for d in self.docs if _matches(d, query)), None)

    def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = self[name] = FakeCollection()
        return collection


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def store(fake_db):
    return RecordStore(db=fake_db)


@pytest.fixture
def session():
    return Session(user_id="user-1", email="grower@example.com", username="grower")


@pytest.fixture
def other_session():
    return Session(user_id="user-2", email="other@example.com")


@pytest.fixture
def activity_logger(store):
    return ActivityLogger(store)


@pytest.fixture
def chat_log(store):
    return ChatLogManager(store)


@pytest.fixture
def service(store, activity_logger):
    return FieldDataService(store, activity_logger)


def make_record(record_id, field, value, location="Plot A", timestamp="2024-03-05T12:00:00", owner="user-1"):
    ts = datetime.fromisoformat(timestamp)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return FieldRecord(id=record_id, field=field, value=value, location=location, timestamp=ts, owner=owner)


@pytest.fixture(name="make_record")
def make_record_fixture():
    return make_record
