"""Data model for names, phonetic codes and match results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Self

from .errors import StoreError


class Environment(Enum):
    """Which pair of name buckets a process works against."""
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def from_name(cls, name: str) -> 'Environment':
        """Look up an environment by its configured name.

        Args:
            name: 'production' or 'development' (case-insensitive)

        Returns:
            Matching Environment

        Raises:
            ValueError: If the name is unknown
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown environment: {name!r}") from None


class Category(Enum):
    """Which half of a personal name a bucket holds."""
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True, slots=True)
class PhoneticCode:
    """Primary and alternate double metaphone codes for a name.

    Both codes are empty for a blank name. When the encoder finds no
    secondary pronunciation the alternate repeats the primary.
    """

    primary: str = ''
    alternate: str = ''

    def __str__(self) -> str:
        return self.to_store_value()

    @property
    def is_empty(self) -> bool:
        return not self.primary and not self.alternate

    def to_store_value(self) -> str:
        """Render as the colon-joined form kept in the hash store."""
        return f"{self.primary}:{self.alternate}"

    @classmethod
    def from_store_value(cls, value: Any) -> Self:
        """Parse a stored 'PRIM:ALT' value.

        Args:
            value: Raw value read from the hash store

        Returns:
            Decoded PhoneticCode (alternate is empty when no colon is present)

        Raises:
            StoreError: If the stored value is not a string
        """
        if not isinstance(value, str):
            raise StoreError(f"Corrupt phonetic code in store: {value!r}")
        primary, _, alternate = value.partition(':')
        return cls(primary, alternate)


@dataclass(slots=True)
class MatchQuery:
    """A candidate name to resolve against the known corpus."""

    first: str = ''
    last: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {'first': self.first, 'last': self.last}


@dataclass(slots=True)
class MatchResult:
    """Corpus names judged to match a query.

    Attributes:
        original: The query as submitted
        first: First-name bucket members matching original.first
        last: Last-name bucket members matching original.last
    """

    original: MatchQuery
    first: List[str] = field(default_factory=list)
    last: List[str] = field(default_factory=list)

    @property
    def has_matches(self) -> bool:
        return bool(self.first or self.last)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation used by the HTTP layer."""
        return {
            'original': self.original.to_dict(),
            'first': list(self.first),
            'last': list(self.last),
        }
