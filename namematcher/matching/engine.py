"""
Name matching engine.

Keeps the in-memory name index in step with the persistent hash store and
answers match queries against it.

Control flow:
- start() loads all four buckets from the store, then signals readiness
- add_name() updates the live bucket first, writes through to the store,
  and reverts the bucket entry if the write fails
- match_name()/match_names() only read the in-memory buckets
"""

import asyncio
from contextlib import AsyncExitStack
from typing import Awaitable, Dict, List, Optional, Sequence, TypeVar
import logging

from ..core.errors import StoreError
from ..core.models import Category, Environment, MatchQuery, MatchResult, PhoneticCode
from ..index.name_index import BucketKey, NameIndex
from ..storage.hash_store import HashStore, SQLiteHashStore
from ..utils.config import NameMatcherConfig
from .classifier import MatchClassifier, MatchThresholds
from .phonetic import encode, get_phonetic_code, validate_name

logger = logging.getLogger(__name__)

T = TypeVar('T')


class NameMatchingEngine:
    """
    Matches candidate names against a known-name corpus.

    The environment is fixed when the engine is built; every add and match
    works against that environment's first/last buckets. Adds to the same
    bucket are serialized so snapshot and rollback never interleave.
    """

    def __init__(
        self,
        store: HashStore,
        environment: Environment = Environment.DEVELOPMENT,
        classifier: Optional[MatchClassifier] = None,
        store_timeout: float = 5.0,
        index: Optional[NameIndex] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Persistent hash store
            environment: Environment whose buckets this engine serves
            classifier: Match classifier (default thresholds if None)
            store_timeout: Seconds to wait on any single store call
            index: Name index to populate (a new empty one if None)
        """
        self.store = store
        self.environment = environment
        self.classifier = classifier or MatchClassifier()
        self.store_timeout = store_timeout
        self.index = index or NameIndex()
        self._locks: Dict[BucketKey, asyncio.Lock] = {
            key: asyncio.Lock() for key in self.index.keys()
        }
        self._ready = asyncio.Event()

    @classmethod
    def from_config(cls, config: NameMatcherConfig) -> 'NameMatchingEngine':
        """
        Build an engine backed by SQLite from a NameMatcherConfig.

        Args:
            config: NameMatcherConfig instance

        Returns:
            Engine that has not been started yet
        """
        thresholds = MatchThresholds(orthographic=config.orthographic_threshold)
        return cls(
            SQLiteHashStore(config.db_path, timeout=config.store_timeout),
            environment=config.environment,
            classifier=MatchClassifier(thresholds),
            store_timeout=config.store_timeout,
        )

    # ========== Lifecycle ==========

    @property
    def is_ready(self) -> bool:
        """True once the initial refresh has completed."""
        return self._ready.is_set()

    async def start(self) -> 'NameMatchingEngine':
        """Load the corpus from the store and signal readiness."""
        logger.info(f"Initializing name matcher ({self.environment.value})")
        await self.refresh()
        self._ready.set()
        logger.info("Name matcher initialization complete")
        return self

    async def wait_until_ready(self, timeout: Optional[float] = None) -> 'NameMatchingEngine':
        """
        Wait for the initial refresh to finish.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Raises:
            asyncio.TimeoutError: If the engine is not ready in time
        """
        await asyncio.wait_for(self._ready.wait(), timeout)
        return self

    async def close(self) -> None:
        """Close the underlying store."""
        await self.store.close()

    async def _call_store(
        self,
        awaitable: Awaitable[T],
        namespace: str,
        category: Optional[Category] = None
    ) -> T:
        """Await a store call, bounded by store_timeout."""
        category_name = category.value if category else None
        try:
            return await asyncio.wait_for(awaitable, self.store_timeout)
        except asyncio.TimeoutError:
            message = f"Store call on {namespace} timed out after {self.store_timeout}s"
            if category is not None:
                # the worker thread cannot be cancelled and may still commit
                message += " (the write may still have been applied)"
            raise StoreError(
                message,
                namespace=namespace,
                category=category_name,
            ) from None
        except StoreError as e:
            e.namespace = e.namespace or namespace
            e.category = e.category or category_name
            raise

    # ========== Refresh ==========

    async def refresh(self) -> None:
        """
        Reload all four buckets from the store.

        All reads must succeed before any bucket is replaced; on failure
        the buckets keep their previous contents.

        Raises:
            StoreError: If any read fails, times out, or holds corrupt data
        """
        logger.info("Name matcher refreshing local names")
        keys = self.index.keys()

        async with AsyncExitStack() as stack:
            for key in keys:
                await stack.enter_async_context(self._locks[key])

            namespaces = [self.index.namespace(*key) for key in keys]
            results = await asyncio.gather(
                *(self._call_store(self.store.get_all(ns), ns) for ns in namespaces),
                return_exceptions=True,
            )

            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                logger.error(f"Encountered error refreshing local names: {failures[0]}")
                raise failures[0]

            try:
                contents = {
                    key: NameIndex.decode_bucket(raw) for key, raw in zip(keys, results)
                }
            except StoreError as e:
                logger.error(f"Encountered corrupt data refreshing local names: {e}")
                raise

            self.index.replace_all(contents)

        logger.info(f"Name matcher refreshing names complete: {self.index.stats()}")

    # ========== Add ==========

    async def add_name(self, first: str, last: str) -> bool:
        """
        Add a name to the live index and the persistent store.

        Both halves are written independently and both writes are always
        attempted. A half whose write fails is reverted in memory.

        Args:
            first: First name
            last: Last name

        Returns:
            True when both halves are stored

        Raises:
            EncodingError: If either name is empty or not a string
            StoreError: The first failed write (first name before last name);
                its category attribute names the failed half
        """
        first = validate_name(first)
        last = validate_name(last)

        results = await asyncio.gather(
            self._add_to_bucket(Category.FIRST, first),
            self._add_to_bucket(Category.LAST, last),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            for failure in failures:
                logger.error(f"Error adding name {first} {last}: {failure}")
            raise failures[0]

        logger.info(f"Name matcher successfully added name {first} {last}")
        return True

    async def _add_to_bucket(self, category: Category, name: str) -> PhoneticCode:
        """Optimistically set one name in its bucket and persist it."""
        key = (category, self.environment)
        bucket = self.index.bucket(*key)
        namespace = self.index.namespace(*key)

        async with self._locks[key]:
            code = get_phonetic_code(name, bucket)
            backup = bucket.get(name)
            bucket[name] = code

            try:
                await self._call_store(
                    self.store.set_field(namespace, name, code.to_store_value()),
                    namespace,
                    category,
                )
            except (StoreError, asyncio.CancelledError):
                logger.warning(f"Error adding {category.value} name {name!r}. Reverting value")
                if backup is None:
                    bucket.pop(name, None)
                else:
                    bucket[name] = backup
                raise

        logger.debug(f"Stored {category.value} name {name!r} as {code}")
        return code

    # ========== Match ==========

    def match_name(self, query: MatchQuery) -> MatchResult:
        """
        Match one query against the active first and last name buckets.

        Args:
            query: Candidate first and last name

        Returns:
            MatchResult listing matching corpus names in bucket order
        """
        return MatchResult(
            original=query,
            first=self._scan(query.first, Category.FIRST),
            last=self._scan(query.last, Category.LAST),
        )

    def match_names(self, queries: Sequence[MatchQuery]) -> List[MatchResult]:
        """Match each query independently, preserving input order."""
        return [self.match_name(query) for query in queries]

    def _scan(self, name: str, category: Category) -> List[str]:
        """Return every bucket member the classifier accepts for name."""
        if not isinstance(name, str):
            return []
        name = name.strip()
        query_code = encode(name)
        if query_code.is_empty:
            return []

        bucket = self.index.bucket(category, self.environment)
        return [
            candidate for candidate, code in bucket.items()
            if self.classifier.is_match(name, candidate, code, query_code)
        ]

    def stats(self) -> Dict[str, int]:
        """Number of known first and last names in the active environment."""
        return {
            category.value: len(self.index.bucket(category, self.environment))
            for category in Category
        }
