"""Map de novo tags onto protein sequences.

A tag such as ``<226.132>PEPT<97.053>`` is mapped by anchoring its fixed
residues (PEPT) at a known protein index and growing the peptide outward.
Fixed sequence components must match the protein residues next to the
anchor. Mass gaps are resolved by walking the protein one residue at a time
while keeping every combination of residues and modifications whose mass
is still compatible with the gap.

Algorithm
---------
1. Modification import (once per configuration): fixed and variable
   modifications are sorted into tables indexed by scope and residue; fixed
   masses are summed per residue; the most negative variable mass per
   growth direction becomes a pruning margin.
2. Component mapping: components left of the anchor are mapped toward the
   N-terminus, components right of it toward the C-terminus. Each step turns
   the surviving segments into the next generation; the search stops as soon
   as a generation is empty.
3. Mass gap resolution: at every residue, fixed modifications add to the
   mass and each variable modification opens an alternative branch.
   Branches heavier than ``gap + tolerance - margin`` are pruned, branches
   within tolerance are accepted. At a peptide terminus a variable terminal
   modification may close the remaining difference.
4. Assembly: every N-terminal segment is combined with the anchor and every
   C-terminal segment; modification sites are re-indexed to the peptide.

Examples
--------
>>> matcher = TagMatcher(
...     fixed_modifications=["Carbamidomethylation of C"],
...     variable_modifications=["Oxidation of M"],
... )
>>> tag = Tag.from_string("<147.035>PEP")
>>> matcher.get_peptide_matches(
...     tag, "AMPEPK", tag_index=2, component_index=1,
...     sequence_matching=SequenceMatchingParams(), mass_tolerance=0.02,
... )
{1: [Peptide(sequence='MPEP', modification_matches=(ModificationMatch(name='Oxidation of M', variable=True, site=1),))]}
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..mass import residue_masses
from ..modifications import (
    Modification,
    ModificationMatch,
    ModificationRegistry,
    ModificationType,
    default_registry,
)
from ..patterns import AminoAcidPattern
from ..peptide import Peptide
from ..sequence_matching import SequenceMatchingParams
from ..tags import AminoAcidSequence, MassGap, SequenceSegment, Tag, TagComponent

logger = logging.getLogger(__name__)

# (generic scope, residue-specific scope) per direction, True = N-terminus
_PROTEIN_TERMINUS = {
    True: (ModificationType.PROTEIN_N_TERM, ModificationType.PROTEIN_N_TERM_AMINO_ACID),
    False: (ModificationType.PROTEIN_C_TERM, ModificationType.PROTEIN_C_TERM_AMINO_ACID),
}
_PEPTIDE_TERMINUS = {
    True: (ModificationType.PEPTIDE_N_TERM, ModificationType.PEPTIDE_N_TERM_AMINO_ACID),
    False: (ModificationType.PEPTIDE_C_TERM, ModificationType.PEPTIDE_C_TERM_AMINO_ACID),
}


# =============================================================================
# Modification Tables
# =============================================================================

class ModificationTable:
    """Modifications indexed by scope and, for residue-specific scopes, residue.

    Lookups return tuples in configuration order; residues are kept sorted.
    """

    def __init__(self):
        self._terminal: Dict[ModificationType, Tuple[Modification, ...]] = {
            t: () for t in ModificationType if not t.is_amino_acid_specific
        }
        self._by_residue: Dict[ModificationType, Dict[str, Tuple[Modification, ...]]] = {
            t: {} for t in ModificationType if t.is_amino_acid_specific
        }
        self._masses: Dict[Tuple[ModificationType, str], float] = {}
        self._count = 0

    def add(self, modification: Modification) -> None:
        mod_type = modification.type
        if mod_type.is_amino_acid_specific:
            by_residue = dict(self._by_residue[mod_type])
            for aa in modification.targets:
                by_residue[aa] = by_residue.get(aa, ()) + (modification,)
                key = (mod_type, aa)
                self._masses[key] = self._masses.get(key, 0.0) + modification.mass
            self._by_residue[mod_type] = dict(sorted(by_residue.items()))
        else:
            self._terminal[mod_type] = self._terminal[mod_type] + (modification,)
            key = (mod_type, "")
            self._masses[key] = self._masses.get(key, 0.0) + modification.mass
        self._count += 1

    def get(self, mod_type: ModificationType, aa: str = "") -> Tuple[Modification, ...]:
        if mod_type.is_amino_acid_specific:
            return self._by_residue[mod_type].get(aa, ())
        return self._terminal[mod_type]

    def mass(self, mod_type: ModificationType, aa: str = "") -> float:
        """Summed mass of the modifications at a scope (and residue)."""
        if not mod_type.is_amino_acid_specific:
            aa = ""
        return self._masses.get((mod_type, aa), 0.0)

    def min_residue_mass(self, mod_type: ModificationType) -> float:
        """Smallest summed mass over residues for a scope, never above zero."""
        masses = [mass for (t, _), mass in self._masses.items() if t == mod_type]
        return min([0.0] + masses)

    def __len__(self) -> int:
        return self._count


# =============================================================================
# Tag Matcher
# =============================================================================

class TagMatcher:
    """Maps tags onto proteins for one fixed/variable modification configuration.

    The matcher is read-only after construction and can be shared between
    threads and reused for any number of tag/protein pairs.

    Parameters
    ----------
    fixed_modifications : Sequence[str]
        Names of modifications always present on their targets
    variable_modifications : Sequence[str]
        Names of modifications that may or may not be present
    registry : ModificationRegistry, optional
        Registry resolving the names (default: default_registry())

    Raises
    ------
    KeyError
        If a name is not in the registry
    NotImplementedError
        If a fixed modification targets a pattern of more than one residue
    """

    def __init__(
        self,
        fixed_modifications: Sequence[str],
        variable_modifications: Sequence[str],
        registry: Optional[ModificationRegistry] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.fixed_modifications = ModificationTable()
        self.variable_modifications = ModificationTable()

        # Most negative variable mass reachable in each growth direction
        self.min_n_term_mass = 0.0
        self.min_c_term_mass = 0.0

        self._import_modification_mapping(fixed_modifications, variable_modifications)

        logger.info(
            f"✓ Tag matcher configured: {len(self.fixed_modifications)} fixed, "
            f"{len(self.variable_modifications)} variable modifications"
        )

    def _import_modification_mapping(
        self,
        fixed_modifications: Sequence[str],
        variable_modifications: Sequence[str],
    ) -> None:
        for name in fixed_modifications:
            modification = self.registry.get(name)
            if modification.pattern_length > 1:
                raise NotImplementedError(
                    f"Fixed modification {name!r} targets a pattern of "
                    f"{modification.pattern_length} residues. Fixed modifications "
                    f"must target a single residue, use a variable modification instead."
                )
            self.fixed_modifications.add(modification)

        for name in variable_modifications:
            modification = self.registry.get(name)
            self.variable_modifications.add(modification)
            if not modification.type.is_c_terminal:
                self.min_n_term_mass = min(self.min_n_term_mass, modification.mass)
            if not modification.type.is_n_terminal:
                self.min_c_term_mass = min(self.min_c_term_mass, modification.mass)

        logger.debug(
            f"Pruning margins: N-term {self.min_n_term_mass:.4f} Da, "
            f"C-term {self.min_c_term_mass:.4f} Da"
        )

    # -------------------------------------------------------------------------
    # Peptide candidate enumeration
    # -------------------------------------------------------------------------

    def get_peptide_matches(
        self,
        tag: Tag,
        protein_sequence: str,
        tag_index: int,
        component_index: int,
        sequence_matching: SequenceMatchingParams,
        mass_tolerance: float,
        report_fixed: bool = False,
    ) -> Dict[int, List[Peptide]]:
        """Enumerate the peptides of a protein consistent with a tag.

        Parameters
        ----------
        tag : Tag
            Tag to map
        protein_sequence : str
            Protein sequence
        tag_index : int
            0-based protein index where the anchor component starts
        component_index : int
            Index of the anchor component in the tag content; must be an
            amino acid sequence or pattern
        sequence_matching : SequenceMatchingParams
            Residue equivalence rules
        mass_tolerance : float
            Tolerance for resolving mass gaps (Da)
        report_fixed : bool
            Report fixed modifications as modification matches

        Returns
        -------
        Dict[int, List[Peptide]]
            Peptides keyed by the protein index of their first residue.
            Empty if the tag does not map at this position.

        Raises
        ------
        NotImplementedError
            If the anchor or another component is of an unsupported kind
        ValueError
            If the mass tolerance is negative
        """
        if mass_tolerance < 0:
            raise ValueError(f"Mass tolerance must be >= 0, got {mass_tolerance}")

        content = tag.content
        anchor = content[component_index]
        if not isinstance(anchor, (AminoAcidSequence, AminoAcidPattern)):
            raise NotImplementedError(
                f"Tag anchor must be an amino acid sequence or pattern, got {type(anchor).__name__}"
            )

        masses = residue_masses(protein_sequence)

        seed = self._append_fixed_component(
            protein_sequence, masses, anchor,
            SequenceSegment.at(tag_index, n_terminus=False), sequence_matching,
        )
        if seed is None:
            return {}

        # Toward the N-terminus
        n_segments = [SequenceSegment.at(seed.start, n_terminus=True)]
        for i in range(component_index - 1, -1, -1):
            n_segments = self.map_tag_component(
                protein_sequence, content[i], n_segments, sequence_matching,
                mass_tolerance, n_terminus=True, last_component=(i == 0),
                masses=masses,
            )
            if not n_segments:
                logger.debug(f"{tag} at {tag_index}: component {i} does not map N-terminally")
                return {}

        # Toward the C-terminus
        c_segments = [SequenceSegment.at(seed.end, n_terminus=False)]
        for i in range(component_index + 1, len(content)):
            c_segments = self.map_tag_component(
                protein_sequence, content[i], c_segments, sequence_matching,
                mass_tolerance, n_terminus=False, last_component=(i == len(content) - 1),
                masses=masses,
            )
            if not c_segments:
                logger.debug(f"{tag} at {tag_index}: component {i} does not map C-terminally")
                return {}

        return self.build_peptides(
            protein_sequence, n_segments, seed, c_segments,
            report_fixed=report_fixed,
            max_variable_modifications=sequence_matching.max_ptms_per_tag_peptide,
        )

    # -------------------------------------------------------------------------
    # Tag component mapping
    # -------------------------------------------------------------------------

    def map_tag_component(
        self,
        protein_sequence: str,
        component: TagComponent,
        segments: List[SequenceSegment],
        sequence_matching: SequenceMatchingParams,
        mass_tolerance: float,
        n_terminus: bool,
        last_component: bool = False,
        masses: Optional[np.ndarray] = None,
    ) -> List[SequenceSegment]:
        """Extend segments by one tag component.

        Parameters
        ----------
        protein_sequence : str
            Protein sequence
        component : TagComponent
            Component to map next to the segments
        segments : List[SequenceSegment]
            Current generation, all growing in the same direction
        sequence_matching : SequenceMatchingParams
            Residue equivalence rules
        mass_tolerance : float
            Tolerance for resolving mass gaps (Da)
        n_terminus : bool
            Growth direction
        last_component : bool
            The component is the last one in this direction, i.e. the
            peptide terminus follows it
        masses : np.ndarray, optional
            Residue masses of the protein, computed if not given

        Returns
        -------
        List[SequenceSegment]
            Next generation of segments, empty if nothing maps

        Raises
        ------
        NotImplementedError
            For component kinds other than sequences, patterns and mass gaps
        """
        if masses is None:
            masses = residue_masses(protein_sequence)

        if isinstance(component, (AminoAcidSequence, AminoAcidPattern)):
            result = []
            for segment in segments:
                extended = self._append_fixed_component(
                    protein_sequence, masses, component, segment, sequence_matching,
                )
                if extended is not None:
                    result.append(extended)
            return result

        if isinstance(component, MassGap):
            max_variable = sequence_matching.max_ptms_per_tag_peptide
            result = []
            for segment in segments:
                for gap_segment in self._map_mass_gap(
                    protein_sequence, masses, component.mass, segment,
                    mass_tolerance, last_component, max_variable,
                ):
                    joined = segment.join(gap_segment)
                    if max_variable is None or joined.n_variable_modifications <= max_variable:
                        result.append(joined)
            return result

        raise NotImplementedError(f"Tag component not supported: {type(component).__name__}")

    def _append_fixed_component(
        self,
        protein_sequence: str,
        masses: np.ndarray,
        component,
        segment: SequenceSegment,
        sequence_matching: SequenceMatchingParams,
    ) -> Optional[SequenceSegment]:
        """Append a sequence or pattern if the neighbouring residues match it."""
        length = component.length
        if segment.n_terminus:
            start, end = segment.start - length, segment.start
        else:
            start, end = segment.end, segment.end + length

        if start < 0 or end > len(protein_sequence):
            return None
        if not component.matches(protein_sequence[start:end], sequence_matching):
            return None

        matches = tuple(m.relocate(start + m.site - 1) for m in component.modification_matches)
        mass = float(masses[start:end].sum())
        mass += sum(self.registry.mass_of(m.name) for m in matches)
        return segment.append(length, mass, matches)

    # -------------------------------------------------------------------------
    # Mass gap resolution
    # -------------------------------------------------------------------------

    def _map_mass_gap(
        self,
        protein_sequence: str,
        masses: np.ndarray,
        gap: float,
        previous: SequenceSegment,
        mass_tolerance: float,
        last_component: bool,
        max_variable: Optional[int],
    ) -> List[SequenceSegment]:
        """Resolve a mass gap next to a segment.

        Returns the segments covering exactly the gap residues, to be joined
        onto ``previous``.
        """
        n_terminus = previous.n_terminus
        peptide_term, peptide_term_aa = _PEPTIDE_TERMINUS[n_terminus]

        margin = self.min_n_term_mass if n_terminus else self.min_c_term_mass
        if last_component:
            # Fixed peptide-terminal masses are always added when the gap closes
            margin += self.fixed_modifications.mass(peptide_term)
            margin += self.fixed_modifications.min_residue_mass(peptide_term_aa)
        upper_bound = gap + mass_tolerance

        if n_terminus:
            anchor, index, step, protein_terminus = previous.start, previous.start - 1, -1, 0
        else:
            anchor, index, step, protein_terminus = previous.end, previous.end, 1, len(protein_sequence) - 1

        candidates = [SequenceSegment.at(anchor, n_terminus)]
        valid: List[SequenceSegment] = []

        while 0 <= index < len(protein_sequence):
            aa_mass = float(masses[index])
            if aa_mass <= 0:
                logger.debug(f"No residue mass for {protein_sequence[index]!r} at {index}, gap walk stops")
                break
            aa = protein_sequence[index]

            extended = self._extend_candidates(
                candidates, aa, aa_mass,
                at_protein_terminus=last_component and index == protein_terminus,
                n_terminus=n_terminus,
                max_variable=max_variable,
            )

            candidates = []
            for candidate in extended:
                if candidate.mass + margin > upper_bound:
                    continue
                candidates.append(candidate)
                valid.extend(self._close_gap(
                    candidate, aa, gap, mass_tolerance, last_component, max_variable,
                ))

            if not candidates:
                break
            index += step

        return valid

    def _extend_candidates(
        self,
        candidates: List[SequenceSegment],
        aa: str,
        aa_mass: float,
        at_protein_terminus: bool,
        n_terminus: bool,
        max_variable: Optional[int],
    ) -> List[SequenceSegment]:
        """Extend every candidate by one residue, branching on variable modifications.

        Variable modifications of the residue side chain are alternatives of
        each other. A variable protein-terminal modification can come on top
        of any of them.
        """
        fixed = self.fixed_modifications
        variable = self.variable_modifications

        residue_mass = aa_mass + fixed.mass(ModificationType.AMINO_ACID, aa)
        residue_variants = variable.get(ModificationType.AMINO_ACID, aa)
        terminal_variants: Tuple[Modification, ...] = ()

        if at_protein_terminus:
            protein_term, protein_term_aa = _PROTEIN_TERMINUS[n_terminus]
            residue_mass += fixed.mass(protein_term) + fixed.mass(protein_term_aa, aa)
            terminal_variants = variable.get(protein_term) + variable.get(protein_term_aa, aa)

        extended = []
        for candidate in candidates:
            base = candidate.extend(residue_mass)
            alternatives = [base] + [
                base.with_modification(m.name, m.mass, variable=True) for m in residue_variants
            ]
            for alternative in alternatives:
                extended.append(alternative)
                for m in terminal_variants:
                    extended.append(alternative.with_modification(m.name, m.mass, variable=True, terminal=True))

        if max_variable is not None:
            extended = [s for s in extended if s.n_variable_modifications <= max_variable]
        return extended

    def _close_gap(
        self,
        candidate: SequenceSegment,
        aa: str,
        gap: float,
        mass_tolerance: float,
        last_component: bool,
        max_variable: Optional[int],
    ) -> List[SequenceSegment]:
        """Return the closed versions of a candidate matching the gap mass.

        For the last component the candidate end becomes the peptide
        terminus: fixed peptide-terminal modifications are added and, if the
        mass is still off, every variable peptide-terminal modification is
        tried once.
        """
        if not last_component:
            return [candidate] if abs(candidate.mass - gap) <= mass_tolerance else []

        peptide_term, peptide_term_aa = _PEPTIDE_TERMINUS[candidate.n_terminus]
        fixed = self.fixed_modifications
        closed = candidate.add_mass(fixed.mass(peptide_term) + fixed.mass(peptide_term_aa, aa))

        if abs(closed.mass - gap) <= mass_tolerance:
            return [closed]
        if closed.terminus_modified:
            return []

        rescued = []
        variable = self.variable_modifications
        for m in variable.get(peptide_term) + variable.get(peptide_term_aa, aa):
            modified = closed.with_modification(m.name, m.mass, variable=True, terminal=True)
            if max_variable is not None and modified.n_variable_modifications > max_variable:
                continue
            if abs(modified.mass - gap) <= mass_tolerance:
                rescued.append(modified)
        return rescued

    # -------------------------------------------------------------------------
    # Peptide assembly
    # -------------------------------------------------------------------------

    def build_peptides(
        self,
        protein_sequence: str,
        n_segments: List[SequenceSegment],
        seed: SequenceSegment,
        c_segments: List[SequenceSegment],
        report_fixed: bool = False,
        max_variable_modifications: Optional[int] = None,
    ) -> Dict[int, List[Peptide]]:
        """Combine N-terminal segments, seed and C-terminal segments into peptides.

        Parameters
        ----------
        protein_sequence : str
            Protein the segments were grown on
        n_segments : List[SequenceSegment]
            Segments ending where the seed starts
        seed : SequenceSegment
            Stretch matched by the anchor component
        c_segments : List[SequenceSegment]
            Segments starting where the seed ends
        report_fixed : bool
            Add fixed modifications as modification matches
        max_variable_modifications : int, optional
            Skip combinations carrying more variable modifications

        Returns
        -------
        Dict[int, List[Peptide]]
            Peptides keyed by the protein index of their first residue

        Raises
        ------
        ValueError
            If a segment does not border the seed
        """
        peptides: Dict[int, List[Peptide]] = {}

        for n_segment in n_segments:
            if n_segment.end != seed.start:
                raise ValueError(f"N-terminal segment ends at {n_segment.end}, seed starts at {seed.start}")

            for c_segment in c_segments:
                if c_segment.start != seed.end:
                    raise ValueError(f"C-terminal segment starts at {c_segment.start}, seed ends at {seed.end}")

                start = n_segment.start
                sequence = protein_sequence[start:c_segment.end]

                matches = [
                    m.relocate(m.site - start + 1)
                    for m in n_segment.modification_matches + seed.modification_matches + c_segment.modification_matches
                ]
                if max_variable_modifications is not None:
                    if sum(1 for m in matches if m.variable) > max_variable_modifications:
                        continue

                if report_fixed:
                    matches.extend(self._fixed_modification_matches(
                        sequence, start, len(protein_sequence), matches,
                    ))
                matches.sort(key=lambda m: m.site)

                peptides.setdefault(start, []).append(Peptide(sequence, tuple(matches)))

        return peptides

    def peptide_mass(self, peptide: Peptide, start: int, protein_length: int) -> float:
        """Neutral mass of a mapped peptide with all fixed modifications applied.

        Fixed modifications already among the peptide's matches (as with
        ``report_fixed``) are counted once.

        Parameters
        ----------
        peptide : Peptide
            Peptide returned by get_peptide_matches
        start : int
            0-based protein index of the first peptide residue
        protein_length : int
            Length of the protein, to place protein C-terminal modifications

        Returns
        -------
        float
            Neutral mass (Da)
        """
        matches = list(peptide.modification_matches)
        matches.extend(self._fixed_modification_matches(
            peptide.sequence, start, protein_length, matches,
        ))
        return Peptide(peptide.sequence, tuple(matches)).get_mass(self.registry)

    def _fixed_modification_matches(
        self,
        sequence: str,
        start: int,
        protein_length: int,
        existing: List[ModificationMatch],
    ) -> List[ModificationMatch]:
        """Fixed modifications of a peptide not already among the existing matches."""
        T = ModificationType
        fixed = self.fixed_modifications
        present = {(m.name, m.site) for m in existing}
        last = len(sequence)

        result = []
        for site, aa in enumerate(sequence, start=1):
            modifications = fixed.get(T.AMINO_ACID, aa)
            if site == 1:
                modifications += fixed.get(T.PEPTIDE_N_TERM) + fixed.get(T.PEPTIDE_N_TERM_AMINO_ACID, aa)
                if start == 0:
                    modifications += fixed.get(T.PROTEIN_N_TERM) + fixed.get(T.PROTEIN_N_TERM_AMINO_ACID, aa)
            if site == last:
                modifications += fixed.get(T.PEPTIDE_C_TERM) + fixed.get(T.PEPTIDE_C_TERM_AMINO_ACID, aa)
                if start + last == protein_length:
                    modifications += fixed.get(T.PROTEIN_C_TERM) + fixed.get(T.PROTEIN_C_TERM_AMINO_ACID, aa)

            for modification in modifications:
                if (modification.name, site) not in present:
                    present.add((modification.name, site))
                    result.append(ModificationMatch(modification.name, False, site))

        return result
