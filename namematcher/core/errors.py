"""Exception types raised by the name matcher."""

from typing import Optional


class NameMatcherError(Exception):
    """Base class for all name matcher errors."""


class EncodingError(NameMatcherError):
    """A name could not be encoded (empty or not a string)."""


class ValidationError(NameMatcherError):
    """An add or match request is malformed (unpaired or empty names)."""


class StoreError(NameMatcherError):
    """The persistent hash store failed, timed out, or rejected a write.

    Attributes:
        namespace: Hash namespace involved in the failed call, if known
        category: Which side of the name ('first' or 'last') failed on add
    """

    def __init__(self, message: str, namespace: Optional[str] = None,
                 category: Optional[str] = None):
        super().__init__(message)
        self.namespace = namespace
        self.category = category
