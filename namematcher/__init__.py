"""namematcher - fuzzy matching of first/last names against a known-name corpus."""

__version__ = "0.1.0"

from .core.models import Category, Environment, MatchQuery, MatchResult, PhoneticCode
from .core.errors import EncodingError, NameMatcherError, StoreError, ValidationError
from .matching.engine import NameMatchingEngine

__all__ = [
    'Category',
    'Environment',
    'MatchQuery',
    'MatchResult',
    'PhoneticCode',
    'NameMatcherError',
    'EncodingError',
    'StoreError',
    'ValidationError',
    'NameMatchingEngine',
]
