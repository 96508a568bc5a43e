"""
Key-value hash stores holding the durable copy of each name bucket.

Each namespace is a hash of name -> 'PRIM:ALT'. The engine only needs two
operations: read a whole hash and set one field.
"""

import asyncio
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import logging

from ..core.errors import StoreError

logger = logging.getLogger(__name__)


class HashStore(ABC):
    """Interface for the persistent hash store."""

    @abstractmethod
    async def get_all(self, namespace: str) -> Dict[str, str]:
        """Read every field of a hash (empty dict if the hash does not exist)."""

    @abstractmethod
    async def set_field(self, namespace: str, field: str, value: str) -> None:
        """Set a single field of a hash."""

    async def close(self) -> None:
        """Release any resources held by the store."""


class MemoryHashStore(HashStore):
    """Dict-backed store for development and tests."""

    def __init__(self, data: Optional[Dict[str, Dict[str, str]]] = None):
        self.data: Dict[str, Dict[str, str]] = {
            namespace: dict(fields) for namespace, fields in (data or {}).items()
        }

    async def get_all(self, namespace: str) -> Dict[str, str]:
        return dict(self.data.get(namespace, {}))

    async def set_field(self, namespace: str, field: str, value: str) -> None:
        self.data.setdefault(namespace, {})[field] = value


class SQLiteHashStore(HashStore):
    """
    Hash store kept in a single SQLite table.

    Blocking sqlite3 calls run in a worker thread so that only the calling
    task waits on disk I/O. A new connection is opened for every call.
    """

    def __init__(self, db_path: str | Path = Path("data/names.db"), timeout: float = 5.0):
        """
        Initialize the store, creating the database if needed.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds a connection waits on a locked database
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self):
        """Create the hash table if it doesn't exist."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            try:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS name_hashes (
                        namespace TEXT NOT NULL,
                        field TEXT NOT NULL,
                        value TEXT NOT NULL,
                        PRIMARY KEY (namespace, field)
                    )
                """)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialize name store at {self.db_path}: {e}") from e

        logger.info(f"Name store ready at {self.db_path}")

    def _get_all_sync(self, namespace: str) -> Dict[str, str]:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        try:
            cursor = conn.execute(
                "SELECT field, value FROM name_hashes WHERE namespace = ?",
                (namespace,)
            )
            return {field: value for field, value in cursor.fetchall()}
        finally:
            conn.close()

    def _set_field_sync(self, namespace: str, field: str, value: str) -> None:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        try:
            conn.execute("""
                INSERT INTO name_hashes (namespace, field, value) VALUES (?, ?, ?)
                ON CONFLICT (namespace, field) DO UPDATE SET value = excluded.value
            """, (namespace, field, value))
            conn.commit()
        finally:
            conn.close()

    async def get_all(self, namespace: str) -> Dict[str, str]:
        try:
            return await asyncio.to_thread(self._get_all_sync, namespace)
        except sqlite3.Error as e:
            raise StoreError(f"Could not read {namespace}: {e}", namespace=namespace) from e

    async def set_field(self, namespace: str, field: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set_field_sync, namespace, field, value)
        except sqlite3.Error as e:
            raise StoreError(
                f"Could not write {field!r} to {namespace}: {e}", namespace=namespace
            ) from e
