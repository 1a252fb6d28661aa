"""Append-only request log stores and the background writer feeding them."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import Any, List, Mapping, Optional, Set

from weatherproxy.core import models
from weatherproxy.core.abstractions import RequestLogEntry, RequestLogStore


logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "requests"


class MemoryRequestLogStore(RequestLogStore):
    """In-process store for tests and local development."""

    def __init__(self) -> None:
        self._entries: List[RequestLogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: RequestLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> List[RequestLogEntry]:
        with self._lock:
            return list(self._entries)


class SQLiteRequestLogStore(RequestLogStore):
    """Stores entries in a SQLite table, created on construction."""

    def __init__(self, url: str, table: str = DEFAULT_COLLECTION) -> None:
        self.table = table
        self._session_factory = models.SessionFactory(url)
        models.run_migrations(self._session_factory, table)

    def append(self, entry: RequestLogEntry) -> None:
        with models.session_scope(self._session_factory) as session:
            models.insert_request_log(session, entry, self.table)

    def entries(self) -> List[RequestLogEntry]:
        with models.session_scope(self._session_factory) as session:
            return models.list_request_logs(session, self.table)


class FirestoreRequestLogStore(RequestLogStore):
    """Adds one document per entry to a Firestore collection."""

    def __init__(self, collection: str = DEFAULT_COLLECTION, client: Any = None) -> None:
        if client is None:
            from google.cloud import firestore

            client = firestore.Client()
        self._collection = client.collection(collection)

    def append(self, entry: RequestLogEntry) -> None:
        self._collection.add(entry.as_dict())


class RequestLogWriter:
    """Submit log entries to a store without blocking the request path.

    Failures are reported through the module logger and never re-raised.
    """

    def __init__(
        self,
        store: RequestLogStore,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 2,
    ) -> None:
        self.store = store
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="request-log"
        )
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    def submit(self, entry: RequestLogEntry) -> Future:
        future = self._executor.submit(self._write, entry)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every write submitted so far has finished."""
        with self._lock:
            pending = set(self._pending)
        if pending:
            wait_futures(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def _write(self, entry: RequestLogEntry) -> bool:
        try:
            self.store.append(entry)
        except Exception:  # noqa: BLE001 - write failures must not reach the caller
            logger.exception(
                "Failed to record request log entry for lat=%s lon=%s", entry.latitude, entry.longitude
            )
            return False
        logger.debug("Recorded request log entry %s", entry.as_dict())
        return True

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)


def build_request_log_store(config: Mapping[str, Any]) -> RequestLogStore:
    """Create the store selected by ``config["BACKEND"]``."""
    backend = config.get("BACKEND", "sqlite")
    collection = config.get("COLLECTION", DEFAULT_COLLECTION)
    if backend == "memory":
        return MemoryRequestLogStore()
    if backend == "sqlite":
        return SQLiteRequestLogStore(config.get("DATABASE_URL", "sqlite:///weatherproxy.db"), collection)
    if backend == "firestore":
        return FirestoreRequestLogStore(collection)
    raise ValueError(f"Unsupported request log backend: {backend}")


__all__ = [
    "DEFAULT_COLLECTION",
    "FirestoreRequestLogStore",
    "MemoryRequestLogStore",
    "RequestLogWriter",
    "SQLiteRequestLogStore",
    "build_request_log_store",
]
