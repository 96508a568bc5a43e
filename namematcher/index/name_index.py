"""In-memory buckets of known names and their cached phonetic codes."""

from typing import Dict, List, Mapping, Tuple
import logging

from ..core.models import Category, Environment, PhoneticCode

logger = logging.getLogger(__name__)

BucketKey = Tuple[Category, Environment]


class NameIndex:
    """
    Four name buckets: first/last names for production and development.

    Each bucket maps a known name (exact, case-sensitive key) to its
    phonetic code. Bucket dicts keep their identity for the life of the
    index; refresh swaps their contents in place.
    """

    # Hash namespace in the persistent store for each bucket
    NAMESPACES: Dict[BucketKey, str] = {
        (Category.FIRST, Environment.PRODUCTION): 'firstNames',
        (Category.LAST, Environment.PRODUCTION): 'lastNames',
        (Category.FIRST, Environment.DEVELOPMENT): 'firstNamesDev',
        (Category.LAST, Environment.DEVELOPMENT): 'lastNamesDev',
    }

    def __init__(self):
        self._buckets: Dict[BucketKey, Dict[str, PhoneticCode]] = {
            key: {} for key in self.NAMESPACES
        }

    def keys(self) -> List[BucketKey]:
        """All four bucket keys."""
        return list(self.NAMESPACES)

    def bucket(self, category: Category, environment: Environment) -> Dict[str, PhoneticCode]:
        """Get the live bucket for a category and environment."""
        return self._buckets[(category, environment)]

    def namespace(self, category: Category, environment: Environment) -> str:
        """Get the store namespace backing a bucket."""
        return self.NAMESPACES[(category, environment)]

    def replace_all(self, contents: Mapping[BucketKey, Mapping[str, PhoneticCode]]) -> None:
        """
        Replace every bucket's contents at once.

        Args:
            contents: New contents for all four buckets

        Raises:
            ValueError: If any bucket is missing from contents
        """
        missing = [self.NAMESPACES[key] for key in self.NAMESPACES if key not in contents]
        if missing:
            raise ValueError(f"Refresh is missing buckets: {', '.join(missing)}")

        for key, bucket in self._buckets.items():
            bucket.clear()
            bucket.update(contents[key])

        logger.debug(f"Name index replaced: {self.stats()}")

    @staticmethod
    def decode_bucket(raw: Mapping[str, str]) -> Dict[str, PhoneticCode]:
        """
        Decode a stored hash ({name: 'PRIM:ALT'}) into a bucket.

        Args:
            raw: Hash contents as read from the store (None for a missing key)

        Returns:
            Mapping of name to PhoneticCode
        """
        if not raw:
            return {}
        return {name: PhoneticCode.from_store_value(value) for name, value in raw.items()}

    def stats(self) -> Dict[str, int]:
        """Number of names in each bucket, keyed by namespace."""
        return {self.NAMESPACES[key]: len(bucket) for key, bucket in self._buckets.items()}
