"""Core data model and error types."""

from .models import Category, Environment, MatchQuery, MatchResult, PhoneticCode
from .errors import EncodingError, NameMatcherError, StoreError, ValidationError

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
]
