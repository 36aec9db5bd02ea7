"""Tag-to-protein matching.

Core algorithms:
1. Modification tables indexed by scope and residue
2. Mass gap resolution by residue-wise walking with variable modification branching
3. Peptide assembly from N-terminal segments, anchor and C-terminal segments
4. Anchor lookup across protein databases
"""

from .tag_matcher import (
    TagMatcher,
    ModificationTable,
)

from .tag_mapping import (
    PeptideProteinMapping,
    find_anchor_positions,
    map_tag_to_proteins,
    map_tag_to_fasta,
)

__all__ = [
    # Tag matching
    'TagMatcher',
    'ModificationTable',
    # Database mapping
    'PeptideProteinMapping',
    'find_anchor_positions',
    'map_tag_to_proteins',
    'map_tag_to_fasta',
]
