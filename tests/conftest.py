"""Shared fixtures for name matcher tests."""

import asyncio
from typing import Dict, Optional, Set

import pytest

from namematcher.core.errors import StoreError
from namematcher.core.models import Environment
from namematcher.matching.engine import NameMatchingEngine
from namematcher.matching.phonetic import encode
from namematcher.storage.hash_store import MemoryHashStore


FIRST_NAMES = ['Robert', 'John', 'Catherine', 'Maria']
LAST_NAMES = ['Smith', 'Jones', 'Johnson', 'Garcia']


def stored_hash(names) -> Dict[str, str]:
    """Build a stored hash {name: 'PRIM:ALT'} for a list of names."""
    return {name: encode(name).to_store_value() for name in names}


class FlakyHashStore(MemoryHashStore):
    """Memory store that can fail or stall selected calls."""

    def __init__(self, data=None):
        super().__init__(data)
        self.fail_reads: Set[str] = set()
        self.fail_writes: Set[str] = set()
        self.write_delay: float = 0.0
        self.read_delay: float = 0.0
        self.write_gate: Optional[asyncio.Event] = None
        self.write_started: Optional[asyncio.Event] = None
        self.writes = []
        self.closed = False

    async def get_all(self, namespace: str) -> Dict[str, str]:
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if namespace in self.fail_reads:
            raise StoreError(f"read failed for {namespace}")
        return await super().get_all(namespace)

    async def set_field(self, namespace: str, field: str, value: str) -> None:
        self.writes.append((namespace, field, value))
        if self.write_started is not None:
            self.write_started.set()
        if self.write_gate is not None:
            await self.write_gate.wait()
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if namespace in self.fail_writes:
            raise StoreError(f"write rejected for {field!r} in {namespace}")
        await super().set_field(namespace, field, value)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def seeded_data():
    """Store contents with names in both environments."""
    return {
        'firstNames': stored_hash(FIRST_NAMES),
        'lastNames': stored_hash(LAST_NAMES),
        'firstNamesDev': stored_hash(['Rachel', 'Bob']),
        'lastNamesDev': stored_hash(['Taylor']),
    }


@pytest.fixture
def flaky_store(seeded_data):
    """Seeded store with failure injection."""
    return FlakyHashStore(seeded_data)


@pytest.fixture
def make_engine(flaky_store):
    """Factory for engines over the seeded flaky store."""
    def _make(environment=Environment.PRODUCTION, **kwargs):
        return NameMatchingEngine(flaky_store, environment=environment, **kwargs)
    return _make
