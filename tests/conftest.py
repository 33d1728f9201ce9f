"""Shared pytest fixtures for the crawler data layer tests.

Fixture summary
---------------
store           — In-memory documents per collection, plus injected failures.
client_factory  — Stand-in for AsyncIOMotorClient that records every client built.
crawler_db      — CrawlerDatabase over a private ConnectionManager using the fakes.

No live MongoDB is needed: the fakes implement the few motor calls the data
layer makes (admin ping, find().to_list(), count_documents, dbStats).
"""

from __future__ import annotations

import asyncio
import os
from typing import Any
from unittest.mock import MagicMock

import pytest

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# config validates on import, so the URI must exist before collection.

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("LOG_DIR", "")

from database import mongodb  # noqa: E402
from database.mongodb import ConnectionManager, CrawlerDatabase  # noqa: E402

TEST_URI = "mongodb://crawler-test:27017"


# ---------------------------------------------------------------------------
# Motor fakes
# ---------------------------------------------------------------------------


class FakeStore:
    def __init__(self) -> None:
        self.documents: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.find_calls: list[tuple[str, dict, dict | None]] = []

    def insert(self, collection: str, *docs: dict[str, Any]) -> None:
        self.documents.setdefault(collection, []).extend(docs)

    def fail(self, collection: str, method: str, error: Exception) -> None:
        self.failures[(collection, method)] = error

    def check(self, collection: str, method: str) -> None:
        error = self.failures.get((collection, method))
        if error is not None:
            raise error


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


def _project(doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return dict(doc)
    return {key: doc[key] for key, keep in projection.items() if keep and key in doc}


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    def __init__(self, database: FakeDatabase, name: str) -> None:
        self.database = database
        self.name = name
        self._store = database.client.store

    def find(self, query: dict[str, Any] | None = None, projection: dict[str, int] | None = None) -> FakeCursor:
        self._store.check(self.name, "find")
        self._store.find_calls.append((self.name, query or {}, projection))
        docs = self._store.documents.get(self.name, [])
        return FakeCursor([_project(d, projection) for d in docs if _matches(d, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        await asyncio.sleep(0)
        self._store.check(self.name, "count_documents")
        return sum(1 for d in self._store.documents.get(self.name, []) if _matches(d, query))


class FakeDatabase:
    def __init__(self, client: FakeClient, name: str) -> None:
        self.client = client
        self.name = name

    def __getitem__(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    async def command(self, name: str) -> dict[str, Any]:
        assert name == "dbStats"
        return {"dataSize": 2048, "storageSize": 4096, "indexes": 7, "indexSize": 512}


class FakeClient:
    def __init__(self, uri: str, options: dict[str, Any], store: FakeStore, ping_error: Exception | None) -> None:
        self.uri = uri
        self.options = options
        self.store = store
        self.admin = MagicMock()
        self.admin.command = self._ping
        self.close = MagicMock()
        self.ping_error = ping_error

    async def _ping(self, name: str) -> dict[str, Any]:
        # a real round trip yields to the loop at least once
        await asyncio.sleep(0)
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1}

    def __getitem__(self, name: str) -> FakeDatabase:
        return FakeDatabase(self, name)


class FakeClientFactory:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self.created: list[FakeClient] = []
        self.ping_error: Exception | None = None
        self.construct_error: Exception | None = None

    def __call__(self, uri: str, **options: Any) -> FakeClient:
        if self.construct_error is not None:
            raise self.construct_error
        client = FakeClient(uri, options, self.store, self.ping_error)
        self.created.append(client)
        return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_shared_connections():
    """Keep the reload-surviving connection cache from leaking between tests."""
    mongodb._shared_connections.clear()
    yield
    mongodb._shared_connections.clear()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client_factory(store: FakeStore) -> FakeClientFactory:
    return FakeClientFactory(store)


@pytest.fixture
def manager(client_factory: FakeClientFactory) -> ConnectionManager:
    return ConnectionManager(TEST_URI, client_factory=client_factory)


@pytest.fixture
def crawler_db(manager: ConnectionManager) -> CrawlerDatabase:
    return CrawlerDatabase(manager)
