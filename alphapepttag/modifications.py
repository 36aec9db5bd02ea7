"""Modification descriptors and the registry resolving them by name.

Every modification has a mass shift, one of nine placement scopes and, for
residue-specific scopes, an amino acid pattern naming the targeted residues.
Names follow the PeptideShaker convention ("Oxidation of M",
"Acetylation of protein N-term") so that search settings can refer to
modifications by name only.

Examples
--------
>>> registry = default_registry()
>>> oxidation = registry.get("Oxidation of M")
>>> oxidation.mass, oxidation.type, oxidation.targets
(15.994915, <ModificationType.AMINO_ACID: 'aa'>, ('M',))

>>> # Custom modifications are added to a registry of your own
>>> registry = ModificationRegistry.with_defaults()
>>> registry.add(Modification(
...     name="Hydroxylation of P",
...     mass=15.994915,
...     type=ModificationType.AMINO_ACID,
...     pattern=AminoAcidPattern.from_string("P"),
... ))
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .constants import (
    ACETYL_MASS,
    AMIDATION_MASS,
    CARBAMIDOMETHYL_MASS,
    CARBAMYL_MASS,
    DEAMIDATION_MASS,
    DIMETHYL_MASS,
    GLYGLY_MASS,
    HOMOSERINE_LACTONE_MASS,
    METHYL_MASS,
    OXIDATION_MASS,
    PHOSPHO_MASS,
    PYRO_GLU_E_MASS,
    PYRO_GLU_Q_MASS,
    TMT_6PLEX_MASS,
)
from .patterns import AminoAcidPattern


# =============================================================================
# Modification Scopes
# =============================================================================

class ModificationType(Enum):
    """Placement scope of a modification."""
    AMINO_ACID = "aa"
    PROTEIN_N_TERM = "protein_n_term"
    PROTEIN_N_TERM_AMINO_ACID = "protein_n_term_aa"
    PROTEIN_C_TERM = "protein_c_term"
    PROTEIN_C_TERM_AMINO_ACID = "protein_c_term_aa"
    PEPTIDE_N_TERM = "peptide_n_term"
    PEPTIDE_N_TERM_AMINO_ACID = "peptide_n_term_aa"
    PEPTIDE_C_TERM = "peptide_c_term"
    PEPTIDE_C_TERM_AMINO_ACID = "peptide_c_term_aa"

    @property
    def is_n_terminal(self) -> bool:
        return self in _N_TERMINAL_TYPES

    @property
    def is_c_terminal(self) -> bool:
        return self in _C_TERMINAL_TYPES

    @property
    def is_protein_terminal(self) -> bool:
        return self in _PROTEIN_TERMINAL_TYPES

    @property
    def is_amino_acid_specific(self) -> bool:
        return self in _AMINO_ACID_SPECIFIC_TYPES


_N_TERMINAL_TYPES = frozenset({
    ModificationType.PROTEIN_N_TERM,
    ModificationType.PROTEIN_N_TERM_AMINO_ACID,
    ModificationType.PEPTIDE_N_TERM,
    ModificationType.PEPTIDE_N_TERM_AMINO_ACID,
})

_C_TERMINAL_TYPES = frozenset({
    ModificationType.PROTEIN_C_TERM,
    ModificationType.PROTEIN_C_TERM_AMINO_ACID,
    ModificationType.PEPTIDE_C_TERM,
    ModificationType.PEPTIDE_C_TERM_AMINO_ACID,
})

_PROTEIN_TERMINAL_TYPES = frozenset({
    ModificationType.PROTEIN_N_TERM,
    ModificationType.PROTEIN_N_TERM_AMINO_ACID,
    ModificationType.PROTEIN_C_TERM,
    ModificationType.PROTEIN_C_TERM_AMINO_ACID,
})

_AMINO_ACID_SPECIFIC_TYPES = frozenset({
    ModificationType.AMINO_ACID,
    ModificationType.PROTEIN_N_TERM_AMINO_ACID,
    ModificationType.PROTEIN_C_TERM_AMINO_ACID,
    ModificationType.PEPTIDE_N_TERM_AMINO_ACID,
    ModificationType.PEPTIDE_C_TERM_AMINO_ACID,
})


# =============================================================================
# Descriptors
# =============================================================================

@dataclass(frozen=True)
class Modification:
    """Immutable modification descriptor.

    Attributes:
        name: Unique name, e.g. "Oxidation of M"
        mass: Monoisotopic mass shift in Da
        type: Placement scope
        pattern: Targeted residues, required for residue-specific scopes
    """

    name: str
    mass: float
    type: ModificationType
    pattern: Optional[AminoAcidPattern] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Modification name must not be empty")
        if self.type.is_amino_acid_specific and self.pattern is None:
            raise ValueError(f"Modification {self.name!r} of type {self.type.name} needs a pattern")
        if not self.type.is_amino_acid_specific and self.pattern is not None:
            raise ValueError(f"Modification {self.name!r} of type {self.type.name} cannot have a pattern")

    @property
    def targets(self) -> Tuple[str, ...]:
        """Residues at the pattern target (empty for terminal-only scopes)."""
        if self.pattern is None:
            return ()
        return self.pattern.targets

    @property
    def pattern_length(self) -> int:
        return 0 if self.pattern is None else self.pattern.length


@dataclass(frozen=True)
class ModificationMatch:
    """A modification placed on a sequence.

    Attributes:
        name: Modification name, resolvable in a ModificationRegistry
        variable: False for fixed modifications
        site: Position of the modified residue. 1-based in peptides and tag
            components, 0-based protein index inside sequence segments.
    """

    name: str
    variable: bool
    site: int

    def relocate(self, site: int) -> 'ModificationMatch':
        return replace(self, site=site)


# =============================================================================
# Registry
# =============================================================================

class ModificationRegistry:
    """Name-indexed collection of modification descriptors.

    Iteration follows insertion order.
    """

    def __init__(self, modifications: Optional[Iterable[Modification]] = None):
        self._modifications: Dict[str, Modification] = {}
        for modification in modifications or ():
            self.add(modification)

    @classmethod
    def with_defaults(cls) -> 'ModificationRegistry':
        """New registry pre-filled with the common modifications."""
        return cls(_DEFAULT_MODIFICATIONS)

    def add(self, modification: Modification) -> None:
        """Register a modification.

        Raises:
            ValueError: If another modification with the same name exists
        """
        if modification.name in self._modifications:
            raise ValueError(f"Modification already registered: {modification.name}")
        self._modifications[modification.name] = modification

    def get(self, name: str) -> Modification:
        """Return the modification registered under a name.

        Raises:
            KeyError: If the name is unknown
        """
        try:
            return self._modifications[name]
        except KeyError:
            raise KeyError(f"Unknown modification: {name}") from None

    def mass_of(self, name: str) -> float:
        return self.get(name).mass

    @property
    def names(self) -> List[str]:
        return list(self._modifications)

    def __contains__(self, name: object) -> bool:
        return name in self._modifications

    def __iter__(self) -> Iterator[Modification]:
        return iter(self._modifications.values())

    def __len__(self) -> int:
        return len(self._modifications)


def _aa(name: str, mass: float, pattern: str,
        mod_type: ModificationType = ModificationType.AMINO_ACID) -> Modification:
    return Modification(name, mass, mod_type, AminoAcidPattern.from_string(pattern))


def _term(name: str, mass: float, mod_type: ModificationType) -> Modification:
    return Modification(name, mass, mod_type)


def _default_modifications() -> List[Modification]:
    T = ModificationType
    return [
        # Alkylation and artefacts
        _aa("Carbamidomethylation of C", CARBAMIDOMETHYL_MASS, "C"),
        _aa("Oxidation of M", OXIDATION_MASS, "M"),
        _aa("Oxidation of W", OXIDATION_MASS, "W"),
        _aa("Deamidation of N", DEAMIDATION_MASS, "N"),
        _aa("Deamidation of Q", DEAMIDATION_MASS, "Q"),
        _aa("Carbamylation of K", CARBAMYL_MASS, "K"),
        _term("Carbamylation of peptide N-term", CARBAMYL_MASS, T.PEPTIDE_N_TERM),

        # Biological modifications
        _aa("Phosphorylation of S", PHOSPHO_MASS, "S"),
        _aa("Phosphorylation of T", PHOSPHO_MASS, "T"),
        _aa("Phosphorylation of Y", PHOSPHO_MASS, "Y"),
        _aa("Acetylation of K", ACETYL_MASS, "K"),
        _aa("Methylation of K", METHYL_MASS, "K"),
        _aa("Methylation of R", METHYL_MASS, "R"),
        _aa("Dimethylation of K", DIMETHYL_MASS, "K"),
        _aa("GlyGly of K", GLYGLY_MASS, "K"),

        # Termini
        _term("Acetylation of protein N-term", ACETYL_MASS, T.PROTEIN_N_TERM),
        _term("Acetylation of peptide N-term", ACETYL_MASS, T.PEPTIDE_N_TERM),
        _term("Amidation of the protein C-term", AMIDATION_MASS, T.PROTEIN_C_TERM),
        _term("Amidation of the peptide C-term", AMIDATION_MASS, T.PEPTIDE_C_TERM),
        _aa("Pyrolidone from Q", PYRO_GLU_Q_MASS, "Q", T.PEPTIDE_N_TERM_AMINO_ACID),
        _aa("Pyrolidone from E", PYRO_GLU_E_MASS, "E", T.PEPTIDE_N_TERM_AMINO_ACID),
        _aa("Pyrolidone from carbamidomethylated C", PYRO_GLU_Q_MASS, "C", T.PEPTIDE_N_TERM_AMINO_ACID),
        _aa("Homoserine lactone of C-term M", HOMOSERINE_LACTONE_MASS, "M", T.PEPTIDE_C_TERM_AMINO_ACID),

        # Labels
        _aa("TMT 6-plex of K", TMT_6PLEX_MASS, "K"),
        _term("TMT 6-plex of peptide N-term", TMT_6PLEX_MASS, T.PEPTIDE_N_TERM),
    ]


_DEFAULT_MODIFICATIONS = tuple(_default_modifications())


def default_registry() -> ModificationRegistry:
    """Registry of the common modifications.

    Every call returns a new registry, so additions never leak into other
    callers. The descriptors themselves are immutable and shared.
    """
    return ModificationRegistry(_DEFAULT_MODIFICATIONS)
