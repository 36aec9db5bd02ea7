"""Peptide candidates produced by tag matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .mass import calculate_modified_neutral_mass, encode_peptide_to_ord
from .modifications import ModificationMatch, ModificationRegistry, default_registry


@dataclass(frozen=True)
class Peptide:
    """Residue sequence with modifications at 1-based sites.

    Examples
    --------
    >>> peptide = Peptide("MPEPK", (ModificationMatch("Oxidation of M", True, 1),))
    >>> peptide.modified_sequence
    'M[Oxidation of M]PEPK'
    """

    sequence: str
    modification_matches: Tuple[ModificationMatch, ...] = field(default=())

    def __post_init__(self):
        if not self.sequence:
            raise ValueError("Peptide sequence must not be empty")
        for match in self.modification_matches:
            if not 1 <= match.site <= len(self.sequence):
                raise ValueError(
                    f"Modification {match.name!r} at site {match.site} outside peptide {self.sequence}"
                )

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def variable_modifications(self) -> Tuple[ModificationMatch, ...]:
        return tuple(m for m in self.modification_matches if m.variable)

    @property
    def fixed_modifications(self) -> Tuple[ModificationMatch, ...]:
        return tuple(m for m in self.modification_matches if not m.variable)

    @property
    def n_variable_modifications(self) -> int:
        return len(self.variable_modifications)

    @property
    def modified_sequence(self) -> str:
        """Sequence with modification names in brackets after their residue."""
        names = {}
        for match in self.modification_matches:
            names.setdefault(match.site, []).append(match.name)

        parts = []
        for site, aa in enumerate(self.sequence, start=1):
            parts.append(aa)
            for name in names.get(site, ()):
                parts.append(f"[{name}]")
        return "".join(parts)

    def get_mass(self, registry: Optional[ModificationRegistry] = None) -> float:
        """Neutral mass: residues + H2O + all modification masses (Da)."""
        if registry is None:
            registry = default_registry()
        modification_masses = np.array(
            [registry.mass_of(m.name) for m in self.modification_matches],
            dtype=np.float64,
        )
        return calculate_modified_neutral_mass(
            encode_peptide_to_ord(self.sequence),
            modification_masses,
        )

    def __str__(self) -> str:
        return self.modified_sequence
