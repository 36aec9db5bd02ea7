"""De novo sequencing tags.

A tag is an ordered list of components read from N- to C-terminus, e.g.
``<226.132>PEPT<97.053>`` for an unresolved N-terminal stretch of 226.132 Da,
the residues PEPT and a C-terminal gap matching a single proline.

Examples
--------
>>> tag = Tag.from_string("<226.132>PEPT<97.053>")
>>> tag.longest_amino_acid_sequence
'PEPT'
>>> tag.n_terminal_gap
226.132

>>> tag = Tag.from_gapped_sequence(226.132, "PEPT", 0.0)
>>> len(tag.content)
2
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..constants import H2O_MASS
from ..modifications import ModificationRegistry
from ..patterns import AminoAcidPattern
from .components import AminoAcidSequence, MassGap, TagComponent, component_mass

_TOKEN = re.compile(r"<([^<>]+)>|([A-Z]+)")


class Tag:
    """Ordered list of tag components."""

    def __init__(self, content: Optional[Iterable[TagComponent]] = None):
        self.content: List[TagComponent] = []
        for component in content or ():
            self.add_component(component)

    @classmethod
    def from_gapped_sequence(cls, n_terminal_gap: float, sequence: str,
                             c_terminal_gap: float) -> 'Tag':
        """Tag made of an N-terminal gap, a sequence and a C-terminal gap.

        Zero gaps are left out.
        """
        tag = cls()
        tag.add_mass_gap(n_terminal_gap)
        tag.add_amino_acid_sequence(AminoAcidSequence(sequence))
        tag.add_mass_gap(c_terminal_gap)
        return tag

    @classmethod
    def from_string(cls, text: str) -> 'Tag':
        """Parse a tag written as residues and ``<mass>`` gaps.

        Raises:
            ValueError: If the text holds anything else
        """
        tag = cls()
        position = 0
        for token in _TOKEN.finditer(text):
            if token.start() != position:
                raise ValueError(f"Cannot parse tag {text!r} at position {position}")
            gap, sequence = token.groups()
            if gap is not None:
                try:
                    tag.add_mass_gap(float(gap))
                except ValueError as e:
                    raise ValueError(f"Invalid mass gap {gap!r} in tag {text!r}") from e
            else:
                tag.add_amino_acid_sequence(AminoAcidSequence(sequence))
            position = token.end()

        if position != len(text) or not tag.content:
            raise ValueError(f"Cannot parse tag {text!r}")
        return tag

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_component(self, component: TagComponent) -> None:
        if isinstance(component, MassGap):
            self.content.append(component)
        elif isinstance(component, AminoAcidSequence):
            self.add_amino_acid_sequence(component)
        else:
            self.content.append(component)

    def add_mass_gap(self, mass: float) -> None:
        """Append a mass gap. Gaps of zero mass are skipped."""
        if mass != 0:
            self.content.append(MassGap(mass))

    def add_amino_acid_sequence(self, sequence: AminoAcidSequence) -> None:
        """Append a sequence, merging it into a directly preceding sequence."""
        if self.content and isinstance(self.content[-1], AminoAcidSequence):
            previous = self.content[-1]
            shift = previous.length
            merged = AminoAcidSequence(
                previous.sequence + sequence.sequence,
                previous.modification_matches + tuple(
                    m.relocate(m.site + shift) for m in sequence.modification_matches
                ),
            )
            self.content[-1] = merged
        else:
            self.content.append(sequence)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    def get_mass(self, registry: Optional[ModificationRegistry] = None) -> float:
        """Neutral mass of the tag: H2O plus the mass of every component."""
        return H2O_MASS + sum(component_mass(c, registry) for c in self.content)

    @property
    def n_terminal_gap(self) -> float:
        if self.content and isinstance(self.content[0], MassGap):
            return self.content[0].mass
        return 0.0

    @property
    def c_terminal_gap(self) -> float:
        if self.content and isinstance(self.content[-1], MassGap):
            return self.content[-1].mass
        return 0.0

    @property
    def length_in_amino_acids(self) -> int:
        """Number of residues in fixed components (gaps not counted)."""
        return sum(c.length for c in self.content if not isinstance(c, MassGap))

    @property
    def longest_amino_acid_sequence(self) -> str:
        longest = ""
        for component in self.content:
            if isinstance(component, AminoAcidSequence) and component.length > len(longest):
                longest = component.sequence
        return longest

    @property
    def anchor_index(self) -> int:
        """Index of the longest fixed component, the first one on ties.

        Raises:
            ValueError: If the tag has no sequence or pattern
        """
        best = -1
        best_length = 0
        for i, component in enumerate(self.content):
            if isinstance(component, (AminoAcidSequence, AminoAcidPattern)) and component.length > best_length:
                best, best_length = i, component.length
        if best < 0:
            raise ValueError(f"Tag {self} has no amino acid sequence to anchor on")
        return best

    def as_sequence(self) -> str:
        return "".join(c.as_sequence() for c in self.content)

    def __str__(self) -> str:
        return self.as_sequence()

    def __repr__(self) -> str:
        return f"Tag({self.as_sequence()!r})"
