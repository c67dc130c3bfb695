# backend/tests/conftest.py
import copy
import itertools
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from focusflow.core.errors import StoreConnectionError
from focusflow.db import mongo
from focusflow.gateway.demo import DemoGateway
from focusflow.models.audio import AudioPreference


# --------------------------------------------------------------------------
# In-memory stand-in for the Motor database handle
# --------------------------------------------------------------------------
class _Result:
    def __init__(self, inserted_id=None, matched_count=0):
        self.inserted_id = inserted_id
        self.matched_count = matched_count


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int):
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n: int):
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length: Optional[int] = None):
        return [copy.deepcopy(d) for d in self._docs[:length]]


class FakeCollection:
    def __init__(self, owner: "FakeDatabase"):
        self.owner = owner
        self.docs: List[Dict[str, Any]] = []

    async def find_one(self, query: Dict[str, Any]):
        self.owner.check()
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query: Dict[str, Any]):
        self.owner.check()
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def insert_one(self, doc: Dict[str, Any]):
        self.owner.check()
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return _Result(inserted_id=stored["_id"])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False):
        self.owner.check()
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return _Result(matched_count=1)
        if upsert:
            doc = {**query, **update.get("$setOnInsert", {}), **update.get("$set", {})}
            await self.insert_one(doc)
        return _Result(matched_count=0)


class FakeDatabase:
    name = "focusflow-test"

    def __init__(self, collections=mongo.REQUIRED_COLLECTIONS):
        self._collections = {name: FakeCollection(self) for name in collections}
        self.down = False
        self.commands: List[str] = []

    def check(self):
        if self.down:
            raise ServerSelectionTimeoutError("fake store is down")

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(self)
        return self._collections[name]

    async def command(self, name: str):
        self.check()
        self.commands.append(name)
        return {"ok": 1.0}

    async def list_collection_names(self):
        self.check()
        return list(self._collections)


@pytest.fixture
def fake_db():
    previous = mongo.db
    db = FakeDatabase()
    mongo.db = db
    yield db
    mongo.db = previous


@pytest.fixture
def no_db():
    previous = mongo.db
    mongo.db = None
    yield
    mongo.db = previous


# --------------------------------------------------------------------------
# Gateways with observable writes
# --------------------------------------------------------------------------
class RecordingGateway(DemoGateway):
    """Demo semantics, but counts audio writes and can pose as live."""

    def __init__(self, is_demo: bool = True):
        super().__init__()
        self.is_demo = is_demo
        self.audio_writes: List[AudioPreference] = []

    async def update_audio_preference(self, preference):
        self.audio_writes.append(preference.model_copy())
        return await super().update_audio_preference(preference)


class BrokenLiveGateway(DemoGateway):
    """A live gateway whose store went away after startup."""

    is_demo = False

    def __init__(self):
        super().__init__()
        self.calls = itertools.count()

    async def record_session(self, duration, mode, energy_level=None):
        next(self.calls)
        raise StoreConnectionError("store went away")

    async def update_settings(self, changes):
        raise StoreConnectionError("store went away")

    async def update_audio_preference(self, preference):
        raise StoreConnectionError("store went away")

    async def get_recent_sessions(self, limit=10):
        raise StoreConnectionError("store went away")


@pytest.fixture
def recording_gateway():
    return RecordingGateway()
