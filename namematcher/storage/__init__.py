"""Persistent hash store backing the name index."""

from .hash_store import HashStore, MemoryHashStore, SQLiteHashStore

__all__ = ['HashStore', 'MemoryHashStore', 'SQLiteHashStore']
