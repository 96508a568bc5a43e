"""String similarity scoring for names."""

from rapidfuzz.distance import JaroWinkler


def similarity(a: str, b: str) -> float:
    """
    Jaro-Winkler similarity between two names.

    Rewards characters shared in matching order plus a common prefix.
    Comparison is case-sensitive.

    Args:
        a: First name
        b: Second name

    Returns:
        Score between 0.0 (dissimilar) and 1.0 (identical); 0.0 if either is empty
    """
    if not a or not b:
        return 0.0
    return float(JaroWinkler.similarity(a, b))
