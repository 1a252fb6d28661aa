from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from weatherproxy.core.abstractions import RequestLogEntry, TemperatureUnit
from weatherproxy.core.requestlog import (
    FirestoreRequestLogStore,
    MemoryRequestLogStore,
    RequestLogWriter,
    SQLiteRequestLogStore,
    build_request_log_store,
)


def make_entry(unit: TemperatureUnit = TemperatureUnit.CELSIUS) -> RequestLogEntry:
    return RequestLogEntry(latitude=51.5, longitude=-0.12, temp_unit=unit, timestamp="2024-01-10T12:30:00.000Z")


class _BrokenStore:
    def append(self, entry: RequestLogEntry) -> None:
        raise ConnectionError("store offline")


class _FakeCollection:
    def __init__(self) -> None:
        self.documents = []

    def add(self, document: dict) -> None:
        self.documents.append(document)


class _FakeFirestoreClient:
    def __init__(self) -> None:
        self.collections = {}

    def collection(self, name: str) -> _FakeCollection:
        return self.collections.setdefault(name, _FakeCollection())


def test_sqlite_store_appends_entries(tmp_path) -> None:
    store = SQLiteRequestLogStore(f"sqlite:///{tmp_path}/log.db")

    store.append(make_entry())
    store.append(make_entry(TemperatureUnit.KELVIN))

    entries = store.entries()
    assert [entry.temp_unit for entry in entries] == [TemperatureUnit.CELSIUS, TemperatureUnit.KELVIN]
    assert entries[0] == make_entry()


def test_sqlite_store_survives_reopen(tmp_path) -> None:
    url = f"sqlite:///{tmp_path}/log.db"
    SQLiteRequestLogStore(url, table="audit").append(make_entry())

    assert len(SQLiteRequestLogStore(url, table="audit").entries()) == 1


def test_sqlite_store_rejects_bad_table_name(tmp_path) -> None:
    with pytest.raises(ValueError):
        SQLiteRequestLogStore(f"sqlite:///{tmp_path}/log.db", table="requests; DROP TABLE x")


def test_firestore_store_adds_documents() -> None:
    client = _FakeFirestoreClient()
    store = FirestoreRequestLogStore("requests", client=client)

    store.append(make_entry())

    assert client.collections["requests"].documents == [
        {"latitude": 51.5, "longitude": -0.12, "temp_unit": "celsius", "timestamp": "2024-01-10T12:30:00.000Z"}
    ]


def test_build_store_by_backend(tmp_path) -> None:
    assert isinstance(build_request_log_store({"BACKEND": "memory"}), MemoryRequestLogStore)
    sqlite_store = build_request_log_store({"BACKEND": "sqlite", "DATABASE_URL": f"sqlite:///{tmp_path}/x.db"})
    assert isinstance(sqlite_store, SQLiteRequestLogStore)
    with pytest.raises(ValueError):
        build_request_log_store({"BACKEND": "redis"})


def test_writer_appends_in_background() -> None:
    store = MemoryRequestLogStore()
    writer = RequestLogWriter(store, executor=ThreadPoolExecutor(max_workers=1))

    future = writer.submit(make_entry())
    writer.wait(timeout=5)

    assert future.result() is True
    assert store.entries() == [make_entry()]
    writer.shutdown()


def test_writer_reports_failures_without_raising(caplog) -> None:
    writer = RequestLogWriter(_BrokenStore())

    with caplog.at_level(logging.ERROR, logger="weatherproxy.core.requestlog"):
        future = writer.submit(make_entry())
        assert future.result(timeout=5) is False

    assert any("Failed to record request log entry" in record.getMessage() for record in caplog.records)
    writer.shutdown()
