"""Protein databases for tag mapping."""

from .fasta_reader import (
    ProteinEntry,
    iter_fasta,
    read_fasta,
    parse_protein_id,
)

__all__ = [
    'ProteinEntry',
    'iter_fasta',
    'read_fasta',
    'parse_protein_id',
]
