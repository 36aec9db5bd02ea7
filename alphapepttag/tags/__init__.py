"""De novo tags and the sequence segments they are mapped onto."""

from .components import (
    AminoAcidSequence,
    MassGap,
    TagComponent,
    component_mass,
)

from .segment import SequenceSegment

from .tag import Tag

from ..patterns import AminoAcidPattern

__all__ = [
    # Components
    'AminoAcidSequence',
    'AminoAcidPattern',
    'MassGap',
    'TagComponent',
    'component_mass',
    # Tags and segments
    'Tag',
    'SequenceSegment',
]
