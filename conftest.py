"""
Shared fixtures: an in-memory stand-in for a MongoDB deployment.

``fake_store`` replaces ``MongoClient`` inside the connector, so tests drive
the real connector, pool, executor and runner without a server.
"""

from typing import Any, Callable, Dict, List, Optional

import pytest

from docframe import DataSourceSettings, MongoDataSource


class FakeCursor:
    def __init__(
        self,
        documents,
        error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
        on_document: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.documents = documents
        self.on_document = on_document
        self.error = error
        self.fail_after = fail_after
        self.closed = False

    def __iter__(self):
        yielded = 0
        for document in self.documents:
            if self.error is not None and yielded == self.fail_after:
                raise self.error
            if self.on_document is not None:
                self.on_document(document)
            yield document
            yielded += 1
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


class FakeCollection:
    def __init__(self, store: "FakeStore", database: str, name: str):
        self.store = store
        self.database = database
        self.name = name

    def find(self, filter_doc):
        self.store.filters.append(filter_doc)
        if self.store.on_find is not None:
            self.store.on_find()
        if self.store.find_error is not None:
            raise self.store.find_error
        documents = self.store.databases.get(self.database, {}).get(self.name, [])
        cursor = FakeCursor(
            list(documents),
            self.store.cursor_error,
            self.store.fail_after,
            self.store.on_document,
        )
        self.store.cursors.append(cursor)
        return cursor


class FakeDatabase:
    def __init__(self, store: "FakeStore", name: str):
        self.store = store
        self.name = name

    def __getitem__(self, collection: str) -> FakeCollection:
        return FakeCollection(self.store, self.name, collection)

    def list_collection_names(self, filter=None):
        names = list(self.store.databases.get(self.name, {}))
        if filter and "name" in filter:
            names = [name for name in names if name == filter["name"]]
        return names

    def command(self, name):
        self.store.pings += 1
        if self.store.ping_error is not None:
            raise self.store.ping_error
        return {"ok": 1.0}


class FakeClient:
    def __init__(self, store: "FakeStore", uri: str, **kwargs):
        self.store = store
        self.uri = uri
        self.options = kwargs
        self.closed = False
        self.admin = FakeDatabase(store, "admin")

    def __getitem__(self, database: str) -> FakeDatabase:
        return FakeDatabase(self.store, database)

    def close(self):
        self.closed = True


class FakeStore:
    """Databases, collections and injectable failures."""

    def __init__(self):
        self.databases: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        self.clients: List[FakeClient] = []
        self.cursors: List[FakeCursor] = []
        self.filters: List[Dict[str, Any]] = []
        self.pings = 0
        self.connect_error: Optional[Exception] = None
        self.ping_error: Optional[Exception] = None
        self.find_error: Optional[Exception] = None
        self.cursor_error: Optional[Exception] = None
        self.fail_after: Optional[int] = None
        self.on_document: Optional[Callable[[Dict[str, Any]], None]] = None
        self.on_find: Optional[Callable[[], None]] = None

    def add(self, database: str, collection: str, documents: List[Dict[str, Any]]):
        self.databases.setdefault(database, {})[collection] = documents

    def client_factory(self, uri: str, **kwargs) -> FakeClient:
        if self.connect_error is not None:
            raise self.connect_error
        client = FakeClient(self, uri, **kwargs)
        self.clients.append(client)
        return client


@pytest.fixture
def fake_store(monkeypatch) -> FakeStore:
    store = FakeStore()
    monkeypatch.setattr("docframe.adapters.mongodb.connector.MongoClient", store.client_factory)
    return store


@pytest.fixture
def settings() -> DataSourceSettings:
    return DataSourceSettings(uri="db.example.com", database="shop")


@pytest.fixture
def datasource(fake_store, settings):
    with MongoDataSource.from_settings(settings) as source:
        yield source
