"""Map tags against whole protein databases.

TagMatcher resolves a tag at one known anchor position. This module finds
the anchor positions: the longest fixed component of the tag is located in
every protein and each hit is handed to the matcher.

Examples
--------
>>> matcher = TagMatcher(["Carbamidomethylation of C"], ["Oxidation of M"])
>>> tag = Tag.from_string("<97.053>PEP<128.095>")
>>> mappings = map_tag_to_proteins(
...     matcher, tag, [("P1", "MKAPPEPKR")],
...     SequenceMatchingParams(), mass_tolerance=0.02,
... )
>>> [(m.accession, m.index, m.peptide.sequence) for m in mappings]
[('P1', 3, 'PPEPK')]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, NamedTuple, Sequence, Union

from ..database.fasta_reader import iter_fasta
from ..patterns import AminoAcidPattern
from ..peptide import Peptide
from ..sequence_matching import MatchingType, SequenceMatchingParams
from ..tags import AminoAcidSequence, Tag
from .tag_matcher import TagMatcher

logger = logging.getLogger(__name__)


class PeptideProteinMapping(NamedTuple):
    """A peptide mapped onto a protein."""
    accession: str
    index: int        # 0-based protein index of the first peptide residue
    peptide: Peptide


def find_anchor_positions(
    component: Union[AminoAcidSequence, AminoAcidPattern],
    protein_sequence: str,
    sequence_matching: SequenceMatchingParams,
) -> List[int]:
    """Return every protein index where a fixed tag component matches.

    Overlapping occurrences are all reported.
    """
    length = component.length
    if length > len(protein_sequence):
        return []

    if isinstance(component, AminoAcidSequence) and sequence_matching.matching_type == MatchingType.STRING:
        positions = []
        position = protein_sequence.find(component.sequence)
        while position != -1:
            positions.append(position)
            position = protein_sequence.find(component.sequence, position + 1)
        return positions

    return [
        i for i in range(len(protein_sequence) - length + 1)
        if component.matches(protein_sequence[i:i + length], sequence_matching)
    ]


def map_tag_to_proteins(
    matcher: TagMatcher,
    tag: Tag,
    proteins: Iterable[Sequence[str]],
    sequence_matching: SequenceMatchingParams,
    mass_tolerance: float,
    report_fixed: bool = False,
) -> List[PeptideProteinMapping]:
    """Map a tag onto every protein of a collection.

    Parameters
    ----------
    matcher : TagMatcher
        Matcher configured with the search modifications
    tag : Tag
        Tag to map, anchored on its longest fixed component
    proteins : Iterable of (accession, sequence, ...)
        Proteins, e.g. ProteinEntry records or (accession, sequence) tuples
    sequence_matching : SequenceMatchingParams
        Residue equivalence rules
    mass_tolerance : float
        Tolerance for resolving mass gaps (Da)
    report_fixed : bool
        Report fixed modifications as modification matches

    Returns
    -------
    List[PeptideProteinMapping]
        One mapping per distinct (accession, index, peptide), in protein order

    Raises
    ------
    ValueError
        If the tag has no amino acid sequence or pattern
    """
    component_index = tag.anchor_index
    anchor = tag.content[component_index]

    mappings: List[PeptideProteinMapping] = []
    seen = set()
    n_proteins = 0

    for protein in proteins:
        accession, sequence = protein[0], protein[1]
        n_proteins += 1

        for position in find_anchor_positions(anchor, sequence, sequence_matching):
            matches = matcher.get_peptide_matches(
                tag, sequence, position, component_index,
                sequence_matching, mass_tolerance, report_fixed,
            )
            for index, peptides in matches.items():
                for peptide in peptides:
                    key = (accession, index, peptide)
                    if key not in seen:
                        seen.add(key)
                        mappings.append(PeptideProteinMapping(accession, index, peptide))

    logger.info(f"✓ Tag {tag}: {len(mappings):,} peptides in {n_proteins:,} proteins")
    return mappings


def map_tag_to_fasta(
    matcher: TagMatcher,
    tag: Tag,
    fasta_path: Union[str, Path],
    sequence_matching: SequenceMatchingParams,
    mass_tolerance: float,
    report_fixed: bool = False,
) -> List[PeptideProteinMapping]:
    """Map a tag onto the proteins of a FASTA file, streaming the file."""
    return map_tag_to_proteins(
        matcher, tag, iter_fasta(fasta_path), sequence_matching,
        mass_tolerance, report_fixed,
    )
