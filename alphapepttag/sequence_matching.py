"""Residue equivalence rules used when comparing tag sequences to proteins.

De novo tags and protein databases both carry ambiguity: I and L cannot be
told apart by mass, databases use B/Z/J/X for uncertain residues. The
matcher never interprets these rules itself; it asks a
SequenceMatchingParams object whether a stretch of protein matches a tag
component.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .constants import AMINO_ACID_COMBINATIONS, INDISTINGUISHABLE_AMINO_ACIDS


class MatchingType(Enum):
    """How residues are compared."""
    STRING = "string"                # Exact character match
    AMINO_ACID = "amino_acid"        # Ambiguous codes (B, Z, J, X) expanded
    INDISTINGUISHABLE_AMINO_ACIDS = "indistinguishable"  # + I/L equivalence


@dataclass
class SequenceMatchingParams:
    """Parameters for matching tag residues against protein residues.

    Attributes:
        matching_type: Residue comparison mode
        limit_x: Maximal share of X residues in a matched protein stretch
        max_ptms_per_tag_peptide: Maximal number of variable modifications
            per candidate peptide (None for no limit)
    """

    matching_type: MatchingType = MatchingType.INDISTINGUISHABLE_AMINO_ACIDS
    limit_x: float = 0.25
    max_ptms_per_tag_peptide: Optional[int] = None

    def __post_init__(self):
        if not 0.0 <= self.limit_x <= 1.0:
            raise ValueError(f"limit_x must be within [0, 1], got {self.limit_x}")
        if self.max_ptms_per_tag_peptide is not None and self.max_ptms_per_tag_peptide < 0:
            raise ValueError(
                f"max_ptms_per_tag_peptide must be >= 0, got {self.max_ptms_per_tag_peptide}"
            )

    @classmethod
    def default(cls) -> 'SequenceMatchingParams':
        """I/L-aware matching with at most 3 variable modifications per peptide."""
        return cls(
            matching_type=MatchingType.INDISTINGUISHABLE_AMINO_ACIDS,
            limit_x=0.25,
            max_ptms_per_tag_peptide=3,
        )

    @classmethod
    def string_matching(cls) -> 'SequenceMatchingParams':
        """Exact character matching."""
        return cls(matching_type=MatchingType.STRING, limit_x=0.0)

    def residues_match(self, expected: str, observed: str) -> bool:
        """Check whether a tag residue matches a protein residue.

        Args:
            expected: Residue from the tag (or modification target)
            observed: Residue found on the protein

        Returns:
            True if the residues are equivalent under the matching type
        """
        if expected == observed:
            return True
        if self.matching_type == MatchingType.STRING:
            return False

        if observed in AMINO_ACID_COMBINATIONS.get(expected, ""):
            return True
        if expected in AMINO_ACID_COMBINATIONS.get(observed, ""):
            return True

        if self.matching_type == MatchingType.INDISTINGUISHABLE_AMINO_ACIDS:
            return expected in INDISTINGUISHABLE_AMINO_ACIDS and observed in INDISTINGUISHABLE_AMINO_ACIDS

        return False

    def matches_any(self, allowed: Iterable[str], observed: str) -> bool:
        """Check whether a protein residue matches any of the allowed residues."""
        return any(self.residues_match(aa, observed) for aa in allowed)

    def x_share_allowed(self, observed: str) -> bool:
        """Check the share of X residues in a protein stretch against limit_x."""
        if not observed or self.matching_type == MatchingType.STRING:
            return True
        return observed.count('X') / len(observed) <= self.limit_x

    def sequences_match(self, expected: str, observed: str) -> bool:
        """Check whether a tag sequence matches a protein stretch of equal length."""
        if len(expected) != len(observed):
            return False
        if not self.x_share_allowed(observed):
            return False
        return all(self.residues_match(e, o) for e, o in zip(expected, observed))
