"""In-memory name index."""

from .name_index import NameIndex, BucketKey

__all__ = ['NameIndex', 'BucketKey']
