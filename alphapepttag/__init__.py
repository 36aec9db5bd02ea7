"""AlphaPeptTag - map de novo sequencing tags onto protein sequences.

Tags combine residues read confidently from a spectrum with mass gaps
covering unresolved residues. AlphaPeptTag finds every peptide of a protein
database consistent with a tag, accounting for fixed and variable
modifications at residue, peptide terminus and protein terminus scopes.

Built on the AlphaPeptFast toolkit conventions: ord()-indexed mass tables,
Numba-compiled mass kernels, plain dataclass parameter objects.
"""

__version__ = "0.1.0"

from alphapepttag import constants
from alphapepttag import mass
from alphapepttag import tags
from alphapepttag import search
from alphapepttag import database

from alphapepttag.modifications import (
    Modification,
    ModificationMatch,
    ModificationRegistry,
    ModificationType,
    default_registry,
)
from alphapepttag.patterns import AminoAcidPattern
from alphapepttag.peptide import Peptide
from alphapepttag.sequence_matching import MatchingType, SequenceMatchingParams
from alphapepttag.tags import AminoAcidSequence, MassGap, SequenceSegment, Tag
from alphapepttag.search import (
    TagMatcher,
    PeptideProteinMapping,
    map_tag_to_proteins,
    map_tag_to_fasta,
)

__all__ = [
    # Submodules
    "constants",
    "mass",
    "tags",
    "search",
    "database",
    # Modifications
    "Modification",
    "ModificationMatch",
    "ModificationRegistry",
    "ModificationType",
    "default_registry",
    # Tags and peptides
    "AminoAcidPattern",
    "AminoAcidSequence",
    "MassGap",
    "SequenceSegment",
    "Tag",
    "Peptide",
    # Matching
    "MatchingType",
    "SequenceMatchingParams",
    "TagMatcher",
    "PeptideProteinMapping",
    "map_tag_to_proteins",
    "map_tag_to_fasta",
]
