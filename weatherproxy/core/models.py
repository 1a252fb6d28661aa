"""Lightweight SQLite helpers for the append-only request log."""
from __future__ import annotations

import os
import re
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List
from urllib.parse import unquote, urlparse

from weatherproxy.core.abstractions import RequestLogEntry, TemperatureUnit

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseSession:
    """Minimal DB-API session wrapper."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def execute(self, sql: str, params: tuple = ()):
        cursor = self.connection.cursor()
        cursor.execute(sql, params)
        return cursor

    def fetchall(self, sql: str, params: tuple = ()):
        cursor = self.execute(sql, params)
        rows = cursor.fetchall()
        cursor.close()
        return rows

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def close(self) -> None:
        self.connection.close()


class SessionFactory:
    def __init__(self, url: str):
        if urlparse(url).scheme not in ("sqlite", ""):
            raise ValueError(f"Unsupported database scheme: {urlparse(url).scheme}")
        self.url = url

    def __call__(self) -> DatabaseSession:
        return DatabaseSession(create_connection(self.url))


def create_connection(url: str) -> sqlite3.Connection:
    # sqlite:///relative.db and sqlite:////absolute/path.db
    parsed = urlparse(url)
    path = unquote(parsed.path)[1:] if parsed.scheme else url
    if not path:
        path = ":memory:"
    elif path != ":memory:":
        path = os.path.abspath(path)
    connection = sqlite3.connect(path, check_same_thread=False)
    connection.row_factory = sqlite3.Row
    return connection


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[DatabaseSession]:
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------

def _checked_table(table: str) -> str:
    if not _TABLE_NAME.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def run_migrations(factory: SessionFactory, table: str = "requests") -> None:
    table = _checked_table(table)
    with session_scope(factory) as session:
        session.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                temp_unit VARCHAR(16) NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )


def insert_request_log(session: DatabaseSession, entry: RequestLogEntry, table: str = "requests") -> int:
    table = _checked_table(table)
    cursor = session.execute(
        f"INSERT INTO {table} (latitude, longitude, temp_unit, timestamp) VALUES (?, ?, ?, ?)",
        (entry.latitude, entry.longitude, entry.temp_unit.value, entry.timestamp),
    )
    return cursor.lastrowid


def list_request_logs(session: DatabaseSession, table: str = "requests") -> List[RequestLogEntry]:
    table = _checked_table(table)
    rows = session.fetchall(f"SELECT latitude, longitude, temp_unit, timestamp FROM {table} ORDER BY id")
    return [
        RequestLogEntry(
            latitude=row["latitude"],
            longitude=row["longitude"],
            temp_unit=TemperatureUnit(row["temp_unit"]),
            timestamp=row["timestamp"],
        )
        for row in rows
    ]
