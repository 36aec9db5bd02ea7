"""Sequence segments: candidate protein stretches grown outward from a tag anchor.

Segments are immutable. Every extension returns a new segment, so branches
created for alternative modifications never share state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Tuple

from ..modifications import ModificationMatch


@dataclass(frozen=True)
class SequenceSegment:
    """Stretch ``protein[start:end]`` growing toward the N- or C-terminus.

    Modification sites are 0-based protein indices.

    Attributes:
        start: First protein index covered
        end: Protein index after the last covered residue
        n_terminus: True if the segment grows toward the N-terminus
        mass: Residue and modification mass accumulated so far (Da)
        modification_matches: Modifications placed on covered residues
        terminus_modified: A variable terminal modification sits on the
            residue at the growing end
    """

    start: int
    end: int
    n_terminus: bool
    mass: float = 0.0
    modification_matches: Tuple[ModificationMatch, ...] = field(default=())
    terminus_modified: bool = False

    @classmethod
    def at(cls, index: int, n_terminus: bool) -> 'SequenceSegment':
        """Empty segment anchored before (N) or at (C) a protein index."""
        return cls(start=index, end=index, n_terminus=n_terminus)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def terminal_index(self) -> int:
        """Protein index of the residue at the growing end."""
        if self.length == 0:
            raise ValueError("Empty segment has no terminal residue")
        return self.start if self.n_terminus else self.end - 1

    @property
    def n_variable_modifications(self) -> int:
        return sum(1 for m in self.modification_matches if m.variable)

    def sequence(self, protein_sequence: str) -> str:
        return protein_sequence[self.start:self.end]

    def extend(self, residue_mass: float) -> 'SequenceSegment':
        """Add the next residue in the growth direction."""
        if self.n_terminus:
            return replace(self, start=self.start - 1, mass=self.mass + residue_mass,
                           terminus_modified=False)
        return replace(self, end=self.end + 1, mass=self.mass + residue_mass,
                       terminus_modified=False)

    def add_mass(self, mass: float) -> 'SequenceSegment':
        return replace(self, mass=self.mass + mass)

    def with_modification(self, name: str, mass: float, variable: bool,
                          terminal: bool = False) -> 'SequenceSegment':
        """Place a modification on the residue at the growing end."""
        match = ModificationMatch(name, variable, self.terminal_index)
        return replace(
            self,
            mass=self.mass + mass,
            modification_matches=self.modification_matches + (match,),
            terminus_modified=self.terminus_modified or terminal,
        )

    def append(self, length: int, mass: float,
               modification_matches: Tuple[ModificationMatch, ...] = ()) -> 'SequenceSegment':
        """Add a stretch of residues in the growth direction.

        The modification matches must already carry protein indices.
        """
        if self.n_terminus:
            return replace(
                self,
                start=self.start - length,
                mass=self.mass + mass,
                modification_matches=modification_matches + self.modification_matches,
                terminus_modified=False,
            )
        return replace(
            self,
            end=self.end + length,
            mass=self.mass + mass,
            modification_matches=self.modification_matches + modification_matches,
            terminus_modified=False,
        )

    def join(self, extension: 'SequenceSegment') -> 'SequenceSegment':
        """Concatenate a segment grown from this segment's growing end.

        Raises:
            ValueError: If the extension does not start where this segment ends
        """
        if extension.n_terminus != self.n_terminus:
            raise ValueError("Cannot join segments growing in opposite directions")
        if self.n_terminus:
            if extension.end != self.start:
                raise ValueError(f"Segment [{extension.start}, {extension.end}) does not precede {self.start}")
            return replace(
                self,
                start=extension.start,
                mass=self.mass + extension.mass,
                modification_matches=extension.modification_matches + self.modification_matches,
                terminus_modified=extension.terminus_modified,
            )
        if extension.start != self.end:
            raise ValueError(f"Segment [{extension.start}, {extension.end}) does not follow {self.end}")
        return replace(
            self,
            end=extension.end,
            mass=self.mass + extension.mass,
            modification_matches=self.modification_matches + extension.modification_matches,
            terminus_modified=extension.terminus_modified,
        )
