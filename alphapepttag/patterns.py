"""Amino acid patterns.

A pattern lists the residues allowed at every position, e.g. "[STY]" for a
phosphorylation site or "N[^P][ST]" for the N-glycosylation motif. Patterns
describe where modifications can go and also serve as tag components when a
de novo tag position is only known to be one of several residues.

Syntax
------
- ``A``: a single residue
- ``[STY]``: any of the listed residues
- ``[^P]``: any standard residue except the listed ones
- ``X``: any residue
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, TYPE_CHECKING

from .constants import STANDARD_AMINO_ACIDS

if TYPE_CHECKING:
    from .modifications import ModificationMatch
    from .sequence_matching import SequenceMatchingParams


def _parse_residues(residues: str, pattern: str) -> FrozenSet[str]:
    if not residues or not residues.isalpha() or not residues.isupper():
        raise ValueError(f"Invalid residues {residues!r} in pattern {pattern!r}")
    return frozenset(residues)


@dataclass(frozen=True)
class AminoAcidPattern:
    """Allowed residues per position plus the index of the targeted position.

    An empty residue set means any residue is allowed at that position.
    Modification matches carry 1-based sites within the pattern.
    """

    residues: Tuple[FrozenSet[str], ...]
    target: int = 0
    modification_matches: Tuple['ModificationMatch', ...] = field(default=())

    def __post_init__(self):
        if not self.residues:
            raise ValueError("Amino acid pattern must have at least one position")
        if not 0 <= self.target < len(self.residues):
            raise ValueError(
                f"Target index {self.target} outside pattern of length {len(self.residues)}"
            )

    @classmethod
    def from_string(cls, pattern: str, target: int = 0) -> 'AminoAcidPattern':
        """Parse a pattern string such as "N[^P][ST]".

        Raises:
            ValueError: If the pattern is empty or malformed
        """
        positions = []
        i = 0
        while i < len(pattern):
            char = pattern[i]
            if char == '[':
                end = pattern.find(']', i)
                if end == -1:
                    raise ValueError(f"Unclosed bracket in pattern {pattern!r}")
                content = pattern[i + 1:end]
                if content.startswith('^'):
                    excluded = _parse_residues(content[1:], pattern)
                    positions.append(frozenset(STANDARD_AMINO_ACIDS) - excluded)
                else:
                    positions.append(_parse_residues(content, pattern))
                i = end + 1
            elif char == 'X':
                positions.append(frozenset())
                i += 1
            else:
                positions.append(_parse_residues(char, pattern))
                i += 1

        return cls(residues=tuple(positions), target=target)

    @property
    def length(self) -> int:
        return len(self.residues)

    @property
    def targets(self) -> Tuple[str, ...]:
        """Residues allowed at the target position, sorted."""
        allowed = self.residues[self.target]
        if not allowed:
            return tuple(STANDARD_AMINO_ACIDS)
        return tuple(sorted(allowed))

    def matches(self, sequence: str, sequence_matching: 'SequenceMatchingParams') -> bool:
        """Check whether a protein stretch of the same length matches the pattern."""
        if len(sequence) != self.length:
            return False
        if not sequence_matching.x_share_allowed(sequence):
            return False
        for allowed, aa in zip(self.residues, sequence):
            if allowed and not sequence_matching.matches_any(allowed, aa):
                return False
        return True

    def as_sequence(self) -> str:
        parts = []
        for allowed in self.residues:
            if not allowed:
                parts.append('X')
            elif len(allowed) == 1:
                parts.append(next(iter(allowed)))
            else:
                parts.append(f"[{''.join(sorted(allowed))}]")
        return ''.join(parts)

    def __str__(self) -> str:
        return self.as_sequence()
