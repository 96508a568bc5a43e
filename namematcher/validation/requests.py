"""Parsing and validation of name lists in add/match requests."""

from typing import List, Optional, Sequence, Tuple

from ..core.errors import ValidationError
from ..core.models import MatchQuery

NAME_SEPARATOR = ','
QUERY_SEPARATOR = ':'


def split_name_field(value: Optional[str]) -> List[str]:
    """Split a comma-separated name field into stripped names."""
    if value is None:
        return []
    return [part.strip() for part in value.split(NAME_SEPARATOR)]


def pair_names(first_names: Optional[Sequence[str]],
               last_names: Optional[Sequence[str]]) -> List[Tuple[str, str]]:
    """
    Pair parallel first/last name lists for an add request.

    Args:
        first_names: First names, one per person
        last_names: Last names, one per person

    Returns:
        List of (first, last) tuples

    Raises:
        ValidationError: If either list is missing, the lengths differ,
            or any pair has an empty name
    """
    if first_names is None or last_names is None:
        raise ValidationError("failure: no names")

    if len(first_names) != len(last_names):
        raise ValidationError(
            f"failure: unpaired first/last ({len(first_names)} first names, "
            f"{len(last_names)} last names)"
        )

    pairs = []
    for i, (first, last) in enumerate(zip(first_names, last_names)):
        first = first.strip() if isinstance(first, str) else ''
        last = last.strip() if isinstance(last, str) else ''
        if not first or not last:
            raise ValidationError(f"failure: empty names in list (position {i})")
        pairs.append((first, last))

    if not pairs:
        raise ValidationError("failure: no names")

    return pairs


def parse_name_list(names: str) -> List[MatchQuery]:
    """
    Parse the path form of a match request.

    Format is 'first,last:first,last'. A missing last name becomes an
    empty string, which matches nothing.

    Args:
        names: Raw path segment

    Returns:
        One MatchQuery per colon-separated entry
    """
    queries = []
    for entry in names.split(QUERY_SEPARATOR):
        parts = entry.split(NAME_SEPARATOR)
        first = parts[0].strip()
        last = parts[1].strip() if len(parts) > 1 else ''
        queries.append(MatchQuery(first=first, last=last))
    return queries
