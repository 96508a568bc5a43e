"""
Phonetic encoding of names with Double Metaphone.

Names are indexed by both codes so that spelling variants which sound
alike (Smith/Smyth, Catherine/Katherine) land on the same encoding.
"""

from typing import Any, Mapping, Optional
import phonetics

from ..core.errors import EncodingError
from ..core.models import PhoneticCode

EMPTY_CODE = PhoneticCode('', '')


def validate_name(name: Any) -> str:
    """
    Check that a name can be encoded and stored.

    Args:
        name: Candidate name

    Returns:
        The name with surrounding whitespace removed

    Raises:
        EncodingError: If the name is not a string or is blank
    """
    if not isinstance(name, str):
        raise EncodingError(f"Name must be a string, got {type(name).__name__}")
    stripped = name.strip()
    if not stripped:
        raise EncodingError("Name must not be empty")
    return stripped


def encode(name: Any) -> PhoneticCode:
    """
    Get the Double Metaphone encoding of a name.

    Blank or non-string input gives the empty code rather than an error,
    so malformed query names simply never match anything.

    Args:
        name: Name to encode

    Returns:
        PhoneticCode with primary and alternate codes
    """
    if not isinstance(name, str) or not name.strip():
        return EMPTY_CODE

    primary, alternate = phonetics.dmetaphone(name.strip().upper())
    primary = primary or ''
    # No secondary pronunciation: the alternate repeats the primary
    return PhoneticCode(primary, alternate or primary)


def get_phonetic_code(
    name: str,
    bucket: Optional[Mapping[str, PhoneticCode]] = None
) -> PhoneticCode:
    """
    Get the phonetic code for a name, reusing the bucket's cached code.

    Args:
        name: Name to encode
        bucket: Name index bucket holding already-encoded names

    Returns:
        Cached code if the name is in the bucket, otherwise a fresh encoding
    """
    if bucket:
        cached = bucket.get(name)
        if cached is not None:
            return cached
    return encode(name)
