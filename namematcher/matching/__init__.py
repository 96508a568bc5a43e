"""
Name matching.

Combines Double Metaphone encoding with Jaro-Winkler similarity under a
tiered threshold policy, and runs matches against the in-memory index.
"""

from .phonetic import encode, get_phonetic_code, validate_name
from .scorer import similarity
from .classifier import MatchClassifier, MatchThresholds, MatchTier, DEFAULT_THRESHOLDS
from .engine import NameMatchingEngine

__all__ = [
    'encode',
    'get_phonetic_code',
    'validate_name',
    'similarity',
    'MatchClassifier',
    'MatchThresholds',
    'MatchTier',
    'DEFAULT_THRESHOLDS',
    'NameMatchingEngine',
]
