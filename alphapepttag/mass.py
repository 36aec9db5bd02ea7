"""Residue and peptide mass calculation.

Sequences are encoded as ord() arrays so that masses can be looked up in the
ord()-indexed AA_MASSES table from Numba-compiled code.

Examples
--------
>>> peptide_ord = encode_peptide_to_ord("PEPTIDE")
>>> calculate_neutral_mass(peptide_ord)
799.359964...

>>> masses = residue_masses("PEPTIDE")
>>> masses[0]
97.052764
"""

from __future__ import annotations

import numpy as np
import numba

from .constants import AA_MASSES, H2O_MASS


def encode_peptide_to_ord(peptide: str) -> np.ndarray:
    """Encode sequence string to ord() array for Numba processing.

    Parameters
    ----------
    peptide : str
        Peptide or protein sequence (uppercase one-letter codes)

    Returns
    -------
    peptide_ord : np.ndarray (uint8)
        Array of ord() values for each residue

    Raises
    ------
    ValueError
        If the sequence contains non-ASCII characters
    """
    try:
        encoded = peptide.encode("ascii")
    except UnicodeEncodeError as e:
        raise ValueError(f"Sequence contains non-ASCII characters: {peptide!r}") from e
    return np.frombuffer(encoded, dtype=np.uint8).copy()


def residue_masses(sequence: str) -> np.ndarray:
    """Return the monoisotopic residue mass at every position of a sequence.

    Positions holding a character without residue mass (e.g. '*') are 0.0.
    """
    return AA_MASSES[encode_peptide_to_ord(sequence)]


@numba.jit(nopython=True, cache=True)
def calculate_neutral_mass(peptide_ord: np.ndarray) -> float:
    """Calculate neutral peptide mass (residues + H2O) from ord() array."""
    total = 0.0
    for i in range(len(peptide_ord)):
        total += AA_MASSES[peptide_ord[i]]
    return total + H2O_MASS


@numba.jit(nopython=True, cache=True)
def calculate_modified_neutral_mass(
    peptide_ord: np.ndarray,
    modification_masses: np.ndarray,
) -> float:
    """Calculate neutral peptide mass with modifications from ord() array.

    Parameters
    ----------
    peptide_ord : np.ndarray (uint8)
        Peptide sequence as ord() values
    modification_masses : np.ndarray (float64)
        Mass shift of every modification carried by the peptide

    Returns
    -------
    float
        Neutral peptide mass including H2O and modifications
    """
    total = 0.0
    for i in range(len(peptide_ord)):
        total += AA_MASSES[peptide_ord[i]]

    total += H2O_MASS

    for i in range(len(modification_masses)):
        total += modification_masses[i]

    return total
