"""Tag components: fixed amino acid sequences and mass gaps.

A de novo tag alternates between stretches of residues read confidently
from the spectrum and mass gaps covering residues that could not be
resolved. AminoAcidPattern (see alphapepttag.patterns) is the third kind of
component, used when a position is only known to be one of several
residues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..constants import AA_MASSES_DICT, AA_MASSES_NONSTANDARD
from ..modifications import ModificationMatch, ModificationRegistry, default_registry
from ..patterns import AminoAcidPattern


def _residue_mass(aa: str) -> float:
    mass = AA_MASSES_DICT.get(aa, AA_MASSES_NONSTANDARD.get(aa))
    if mass is None:
        raise ValueError(f"No mass for residue {aa!r}")
    return mass


@dataclass(frozen=True)
class AminoAcidSequence:
    """Residues read from the spectrum.

    Modification matches carry 1-based sites within the sequence.
    """

    sequence: str
    modification_matches: Tuple[ModificationMatch, ...] = field(default=())

    def __post_init__(self):
        if not self.sequence or not self.sequence.isalpha() or not self.sequence.isupper():
            raise ValueError(f"Invalid amino acid sequence: {self.sequence!r}")
        for match in self.modification_matches:
            if not 1 <= match.site <= len(self.sequence):
                raise ValueError(
                    f"Modification {match.name!r} at site {match.site} outside sequence {self.sequence}"
                )

    @property
    def length(self) -> int:
        return len(self.sequence)

    def matches(self, sequence: str, sequence_matching) -> bool:
        """Check whether a protein stretch matches this sequence."""
        return sequence_matching.sequences_match(self.sequence, sequence)

    def get_mass(self, registry: Optional[ModificationRegistry] = None) -> float:
        """Residue masses plus the masses of the attached modifications."""
        if registry is None:
            registry = default_registry()
        mass = sum(_residue_mass(aa) for aa in self.sequence)
        return mass + sum(registry.mass_of(m.name) for m in self.modification_matches)

    def as_sequence(self) -> str:
        return self.sequence

    def __str__(self) -> str:
        return self.sequence


@dataclass(frozen=True)
class MassGap:
    """Unresolved stretch of residues with known total mass (Da)."""

    mass: float

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"Mass gap must be positive, got {self.mass}")

    def get_mass(self, registry: Optional[ModificationRegistry] = None) -> float:
        return self.mass

    def as_sequence(self) -> str:
        return f"<{self.mass:.4f}>"

    def __str__(self) -> str:
        return self.as_sequence()


TagComponent = Union[AminoAcidSequence, AminoAcidPattern, MassGap]


def component_mass(component: TagComponent, registry: Optional[ModificationRegistry] = None) -> float:
    """Mass of a tag component.

    Raises:
        ValueError: For patterns with more than one allowed residue at a position
        NotImplementedError: For unsupported component kinds
    """
    if isinstance(component, (AminoAcidSequence, MassGap)):
        return component.get_mass(registry)

    if isinstance(component, AminoAcidPattern):
        if registry is None:
            registry = default_registry()
        mass = 0.0
        for allowed in component.residues:
            if len(allowed) != 1:
                raise ValueError(f"Mass of pattern {component} is ambiguous")
            mass += _residue_mass(next(iter(allowed)))
        return mass + sum(registry.mass_of(m.name) for m in component.modification_matches)

    raise NotImplementedError(f"Tag component not supported: {type(component).__name__}")
