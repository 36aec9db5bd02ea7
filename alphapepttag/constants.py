"""Physical constants and amino acid masses for tag-to-protein mapping.

This module provides the physical constants, residue masses, modification
masses and tolerance settings used throughout AlphaPeptTag. All values are
sourced from NIST or established proteomics standards.

Residue masses are provided in both dictionary and ord()-indexed array
formats for compatibility with both standard Python and Numba JIT-compiled
code.

Key Features
------------
- Correct PROTON_MASS (1.007276466622 Da, not hydrogen atom mass!)
- ord()-indexed AA_MASSES array for high-performance Numba code
- Ambiguous residue codes (B, Z, J, X) with their possible residues
- Common modification masses used by the default modification registry
- Default fragment tolerance for de novo tag gaps

Sources
-------
- NIST physical constants: https://physics.nist.gov/cgi-bin/cuu/Value
- IUPAC amino acid masses: https://www.unimod.org/masses.html
- Unimod modification masses: https://www.unimod.org/modifications_list.php
"""

import numpy as np

# =============================================================================
# Fundamental Physical Constants (NIST values)
# =============================================================================

# Proton mass (NOT hydrogen atom mass!)
# Source: NIST 2018 CODATA
PROTON_MASS = 1.007276466622  # Da

# Water mass (H2O)
# Calculated: 2*1.007825 + 15.994915 = 18.010564684
H2O_MASS = 18.010564684  # Da

# Ammonia mass (NH3)
# Calculated: 14.003074 + 3*1.007825 = 17.026549101
NH3_MASS = 17.026549101  # Da

# =============================================================================
# Amino Acid Monoisotopic Masses (Da)
# =============================================================================

# Standard 20 amino acids (unmodified residues)
AA_MASSES_DICT = {
    'A': 71.037114,   # Alanine
    'R': 156.101111,  # Arginine
    'N': 114.042927,  # Asparagine
    'D': 115.026943,  # Aspartic acid
    'C': 103.009185,  # Cysteine (unmodified)
    'E': 129.042593,  # Glutamic acid
    'Q': 128.058578,  # Glutamine
    'G': 57.021464,   # Glycine
    'H': 137.058912,  # Histidine
    'I': 113.084064,  # Isoleucine
    'L': 113.084064,  # Leucine
    'K': 128.094963,  # Lysine
    'M': 131.040485,  # Methionine
    'F': 147.068414,  # Phenylalanine
    'P': 97.052764,   # Proline
    'S': 87.032028,   # Serine
    'T': 101.047679,  # Threonine
    'W': 186.079313,  # Tryptophan
    'Y': 163.063320,  # Tyrosine
    'V': 99.068414,   # Valine
}

STANDARD_AMINO_ACIDS = "".join(sorted(AA_MASSES_DICT))

# Non-standard and ambiguous codes found in protein databases
# Mapped to the mass of the most common interpretation
AA_MASSES_NONSTANDARD = {
    'X': 113.084064,  # Unknown → Leu/Ile (most common)
    'Z': 128.058578,  # Glu/Gln → Gln
    'B': 114.042927,  # Asp/Asn → Asn
    'J': 113.084064,  # Leu/Ile → Leu
    'U': 150.953636,  # Selenocysteine
    'O': 237.147727,  # Pyrrolysine
}

# Residues an ambiguous code can stand for
AMINO_ACID_COMBINATIONS = {
    'B': 'DN',
    'J': 'IL',
    'Z': 'EQ',
    'X': STANDARD_AMINO_ACIDS,
}

# I and L share their elemental composition
INDISTINGUISHABLE_AMINO_ACIDS = frozenset('IJL')

# =============================================================================
# ord()-Indexed Arrays for Numba
# =============================================================================

# Array size 256 covers full ASCII range
# Access via: AA_MASSES[ord('A')] → 71.037114
# Characters without a residue mass (e.g. '*') stay at 0.0
AA_MASSES = np.zeros(256, dtype=np.float64)

for aa, mass in AA_MASSES_DICT.items():
    AA_MASSES[ord(aa)] = mass

for aa, mass in AA_MASSES_NONSTANDARD.items():
    AA_MASSES[ord(aa)] = mass

# =============================================================================
# Common Modification Masses
# =============================================================================

# Carbamidomethylation of Cysteine (Unimod:4)
CARBAMIDOMETHYL_MASS = 57.021464

# Oxidation (Unimod:35)
OXIDATION_MASS = 15.994915

# Acetylation (Unimod:1)
ACETYL_MASS = 42.010565

# Phosphorylation (Unimod:21)
PHOSPHO_MASS = 79.966331

# Deamidation of N/Q (Unimod:7)
DEAMIDATION_MASS = 0.984016

# Amidation of C-termini (Unimod:2)
AMIDATION_MASS = -0.984016

# Pyro-glu from Q / pyro-carbamidomethyl from C (Unimod:28, Unimod:26)
PYRO_GLU_Q_MASS = -17.026549

# Pyro-glu from E (Unimod:27)
PYRO_GLU_E_MASS = -18.010565

# Methylation / dimethylation (Unimod:34, Unimod:36)
METHYL_MASS = 14.015650
DIMETHYL_MASS = 28.031300

# Carbamylation (Unimod:5)
CARBAMYL_MASS = 43.005814

# TMT 6-plex / 10-plex / 11-plex (Unimod:737)
TMT_6PLEX_MASS = 229.162932

# GlyGly ubiquitin remnant (Unimod:121)
GLYGLY_MASS = 114.042927

# Homoserine lactone from C-terminal M after CNBr cleavage (Unimod:10)
HOMOSERINE_LACTONE_MASS = -48.003371

# =============================================================================
# Default Tolerance Settings
# =============================================================================

# Default tolerance in Da for resolving de novo mass gaps
# Gaps come from fragment ion differences, so fragment accuracy applies
DEFAULT_FRAGMENT_TOLERANCE = 0.02  # Da
