"""Persistent key-value storage and a typed repository on top of it.

Values are JSON strings. The repository wraps each model in an envelope
``{"v": <schema_version>, "data": ...}`` so a stored shape that no longer
matches its model is dropped (and logged) instead of half-parsed.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import TypeVar

import libsql_experimental as libsql
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class KeyValueStore(ABC):
    """Durable string storage: synchronous get/set, no expiry of its own."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


class MemoryStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class LibsqlStore(KeyValueStore):
    """Key-value table in a local libsql database file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _conn(self):
        return libsql.connect(self.path)

    def init(self) -> None:
        conn = self._conn()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        conn.commit()
        conn.close()

    def get(self, key: str) -> str | None:
        conn = self._conn()
        cursor = conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        conn.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._conn()
        conn.execute("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value))
        conn.commit()
        conn.close()

    def delete(self, key: str) -> None:
        conn = self._conn()
        conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        conn.commit()
        conn.close()


class Repository:
    """Typed, versioned access to a KeyValueStore."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get(self, key: str, model: type[M]) -> M | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable value at %r", key)
            return None
        if not isinstance(envelope, dict) or envelope.get("v") != model.schema_version:
            logger.warning(
                "Ignoring %r: stored schema %r, expected %s v%d",
                key, envelope.get("v") if isinstance(envelope, dict) else None,
                model.__name__, model.schema_version,
            )
            return None
        try:
            return model.model_validate(envelope.get("data"))
        except ValidationError as e:
            logger.warning("Ignoring %r: does not match %s (%d errors)", key, model.__name__, e.error_count())
            return None

    def set(self, key: str, value: BaseModel) -> None:
        envelope = {"v": type(value).schema_version, "data": value.model_dump(mode="json")}
        self.store.set(key, json.dumps(envelope))

    def delete(self, key: str) -> None:
        self.store.delete(key)
