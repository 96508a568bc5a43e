"""
Tiered match decisions combining phonetic agreement and string similarity.

The tiers form a relaxation ladder: agreement on both phonetic codes needs
only modest string similarity, agreement on one code needs more, and no
phonetic agreement at all needs near-identical spelling.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.models import PhoneticCode
from .phonetic import encode
from .scorer import similarity


class MatchTier(Enum):
    """Tier that accepted a name pair."""
    FULL_AGREEMENT = "full_agreement"  # Both codes equal (Tier A)
    PARTIAL_AGREEMENT = "partial_agreement"  # One code equal (Tier B)
    ORTHOGRAPHIC = "orthographic"  # Spelling alone (Tier C)


@dataclass(frozen=True, slots=True)
class MatchThresholds:
    """Minimum Jaro-Winkler score for each tier."""

    full_agreement: float = 0.60
    partial_agreement: float = 0.70
    orthographic: float = 0.82

    def __post_init__(self):
        """Thresholds must not loosen as phonetic agreement weakens."""
        if not (0.0 <= self.full_agreement <= self.partial_agreement
                <= self.orthographic <= 1.0):
            raise ValueError(
                "Thresholds must satisfy 0 <= full_agreement <= partial_agreement "
                f"<= orthographic <= 1, got {self.full_agreement}, "
                f"{self.partial_agreement}, {self.orthographic}"
            )


DEFAULT_THRESHOLDS = MatchThresholds()


class MatchClassifier:
    """
    Decides whether a query name and a corpus name are the same name.

    Tiers (first satisfied wins):
    - Both codes agree and score >= 0.60
    - Either code agrees and score >= 0.70
    - Score >= 0.82 (orthographic fallback, configurable)
    """

    def __init__(self, thresholds: MatchThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def decide(
        self,
        primary_match: bool,
        alternate_match: bool,
        score: float
    ) -> Optional[MatchTier]:
        """
        Apply the tier ladder to precomputed inputs.

        Args:
            primary_match: Primary codes are equal
            alternate_match: Alternate codes are equal
            score: Jaro-Winkler similarity of the two names

        Returns:
            The first tier satisfied, or None for no match
        """
        if primary_match and alternate_match and score >= self.thresholds.full_agreement:
            return MatchTier.FULL_AGREEMENT
        if (primary_match or alternate_match) and score >= self.thresholds.partial_agreement:
            return MatchTier.PARTIAL_AGREEMENT
        if score >= self.thresholds.orthographic:
            return MatchTier.ORTHOGRAPHIC
        return None

    def classify(
        self,
        query_name: str,
        candidate_name: str,
        candidate_code: PhoneticCode,
        query_code: Optional[PhoneticCode] = None
    ) -> Optional[MatchTier]:
        """
        Classify a query name against one corpus entry.

        Args:
            query_name: Name submitted by the client
            candidate_name: Name from the corpus
            candidate_code: Cached phonetic code of the corpus name
            query_code: Encoding of query_name, computed if not supplied

        Returns:
            The accepting tier, or None if the names do not match
        """
        if not query_name or not candidate_name:
            return None
        if query_code is None:
            query_code = encode(query_name)
        if query_code.is_empty:
            return None

        return self.decide(
            query_code.primary == candidate_code.primary,
            query_code.alternate == candidate_code.alternate,
            similarity(query_name, candidate_name),
        )

    def is_match(
        self,
        query_name: str,
        candidate_name: str,
        candidate_code: PhoneticCode,
        query_code: Optional[PhoneticCode] = None
    ) -> bool:
        """True if any tier accepts the pair."""
        return self.classify(query_name, candidate_name, candidate_code, query_code) is not None
