"""FASTA file reading for tag mapping.

Streaming parser yielding one ProteinEntry per record. Supports UniProt
(``>sp|P12345|NAME_HUMAN ...``) and generic (``>PROTEIN_ID ...``) headers.
Sequences are upper-cased; a trailing stop codon ``*`` is removed.
"""

import logging
from pathlib import Path
from typing import Iterator, List, NamedTuple, Tuple, Union

logger = logging.getLogger(__name__)


class ProteinEntry(NamedTuple):
    """One FASTA record."""
    accession: str
    sequence: str
    description: str


def parse_protein_id(header: str) -> Tuple[str, str]:
    """Extract accession and description from a FASTA header.

    Parameters
    ----------
    header : str
        FASTA header line (without leading '>')

    Returns
    -------
    accession : str
        UniProt accession (second '|' field) or first whitespace token
    description : str
        Full header line

    Examples
    --------
    >>> parse_protein_id("sp|P12345|NAME_HUMAN Some protein")
    ('P12345', 'sp|P12345|NAME_HUMAN Some protein')

    >>> parse_protein_id("PROT123 Description here")
    ('PROT123', 'PROT123 Description here')
    """
    description = header.strip()
    if not description:
        raise ValueError("Empty FASTA header")

    first_token = description.split()[0]
    parts = first_token.split('|')
    if len(parts) >= 2 and parts[1]:
        return parts[1], description
    return first_token, description


def _entry(header: str, lines: List[str]) -> ProteinEntry:
    accession, description = parse_protein_id(header)
    sequence = ''.join(lines).upper().rstrip('*')
    return ProteinEntry(accession, sequence, description)


def iter_fasta(fasta_path: Union[str, Path], min_length: int = 0) -> Iterator[ProteinEntry]:
    """Yield the proteins of a FASTA file one by one.

    Parameters
    ----------
    fasta_path : str or Path
        Path to FASTA file
    min_length : int
        Minimum protein length (default: 0, no filter)

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ValueError
        If sequence lines appear before the first header
    """
    fasta_path = Path(fasta_path)
    if not fasta_path.exists():
        raise FileNotFoundError(f"FASTA file not found: {fasta_path}")

    header = None
    lines: List[str] = []

    with open(fasta_path) as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith(';'):
                continue
            if line.startswith('>'):
                if header is not None:
                    entry = _entry(header, lines)
                    if entry.sequence and len(entry.sequence) >= min_length:
                        yield entry
                header = line[1:]
                lines = []
            elif header is None:
                raise ValueError(f"{fasta_path.name}:{line_number}: sequence before first header")
            else:
                lines.append(line)

    if header is not None:
        entry = _entry(header, lines)
        if entry.sequence and len(entry.sequence) >= min_length:
            yield entry


def read_fasta(fasta_path: Union[str, Path], min_length: int = 0) -> List[ProteinEntry]:
    """Read all proteins of a FASTA file.

    Examples
    --------
    >>> proteins = read_fasta("human.fasta", min_length=7)
    >>> accession, sequence, description = proteins[0]
    """
    proteins = list(iter_fasta(fasta_path, min_length=min_length))
    logger.info(f"✓ Read {len(proteins):,} proteins from {Path(fasta_path).name}")
    return proteins
