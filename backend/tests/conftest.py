"""
Tabrik Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_db: In-memory stand-in for an async MongoDB database
    ├── connected_connector: MongoConnector wired to fake_db
    ├── disconnected_connector: MongoConnector in degraded mode
    ├── test_client: HTTPX AsyncClient against the app, connected
    └── offline_client: HTTPX AsyncClient against the app, degraded mode
"""

import copy
import os
import tempfile
from collections import defaultdict
from pathlib import Path
from types import SimpleNamespace

# Override settings for testing BEFORE any tabrik imports
os.environ["MONGODB_URI"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["NODE_ENV"] = "test"
_frontend_dir = Path(tempfile.mkdtemp(prefix="tabrik_frontend_"))
(_frontend_dir / "index.html").write_text("<html><body>tabrik-test-page</body></html>")
(_frontend_dir / "app.js").write_text("console.log('tabrik');")
os.environ["FRONTEND_DIR"] = str(_frontend_dir)

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import DESCENDING, ReturnDocument

from tabrik.config import Settings
from tabrik.database import MongoConnector, get_connector


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection double
# ══════════════════════════════════════════════════════════════════════════

def _matches(doc, query):
    return all(doc.get(key) == value for key, value in (query or {}).items())


class FakeCursor:
    """Supports the find().sort(...).to_list(...) chain used by the services."""

    def __init__(self, docs):
        self._docs = docs

    def sort(self, key_or_list, direction=None):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        # Stable sorts applied from the least to the most significant key
        for key, order in reversed(keys):
            self._docs.sort(key=lambda doc: doc.get(key), reverse=order == DESCENDING)
        return self

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Async subset of pymongo's AsyncCollection, backed by a list."""

    def __init__(self):
        self.docs = []

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query)])

    async def find_one(self, query=None):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(update.get("$set", {}))
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)


class FakeDatabase(defaultdict):
    name = "tabrik_test"

    def __init__(self):
        super().__init__(FakeCollection)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def base_settings():
    return Settings(mongodb_uri="")


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def connected_connector(base_settings, fake_db):
    """A connector in the state a successful startup ping leaves it in."""
    connector = MongoConnector(base_settings)
    connector.db = fake_db
    connector._connected = True
    return connector


@pytest.fixture
def disconnected_connector(base_settings):
    return MongoConnector(base_settings)


async def _client_for(connector):
    from tabrik.main import app

    app.dependency_overrides[get_connector] = lambda: connector
    app.state.mongo = connector
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(connected_connector):
    """
    HTTPX AsyncClient talking to the app with a connected (in-memory) store.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/orders")
    """
    async for client in _client_for(connected_connector):
        yield client


@pytest_asyncio.fixture
async def offline_client(disconnected_connector):
    """HTTPX AsyncClient talking to the app in degraded mode."""
    async for client in _client_for(disconnected_connector):
        yield client
