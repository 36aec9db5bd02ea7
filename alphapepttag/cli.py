"""Command-line tag mapping.

Maps de novo tags against a FASTA database and writes one TSV row per
peptide.

Usage
-----
alphapepttag-map --fasta human.fasta --tag "<226.132>PEPT<97.053>" \\
    --fixed "Carbamidomethylation of C" --variable "Oxidation of M" \\
    --tolerance 0.02 --output mappings.tsv
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .constants import DEFAULT_FRAGMENT_TOLERANCE
from .database import read_fasta
from .modifications import default_registry
from .sequence_matching import MatchingType, SequenceMatchingParams
from .search import TagMatcher, map_tag_to_proteins
from .tags import Tag

logger = logging.getLogger(__name__)

TSV_COLUMNS = [
    "tag",
    "accession",
    "start",
    "sequence",
    "modified_sequence",
    "modifications",
    "n_variable",
    "mass",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alphapepttag-map",
        description="Map de novo sequencing tags onto a FASTA protein database",
    )
    parser.add_argument("--fasta", type=Path, help="Protein database (FASTA)")
    parser.add_argument(
        "--tag", action="append", default=[], dest="tags",
        help='Tag such as "<226.132>PEPT<97.053>" (repeatable)',
    )
    parser.add_argument("--fixed", action="append", default=[], help="Fixed modification name (repeatable)")
    parser.add_argument("--variable", action="append", default=[], help="Variable modification name (repeatable)")
    parser.add_argument(
        "--tolerance", type=float, default=DEFAULT_FRAGMENT_TOLERANCE,
        help=f"Mass gap tolerance in Da (default: {DEFAULT_FRAGMENT_TOLERANCE})",
    )
    parser.add_argument(
        "--matching", choices=[t.value for t in MatchingType],
        default=MatchingType.INDISTINGUISHABLE_AMINO_ACIDS.value,
        help="Residue matching mode",
    )
    parser.add_argument("--max-ptms", type=int, default=None, help="Maximal variable modifications per peptide")
    parser.add_argument("--report-fixed", action="store_true", help="Report fixed modifications")
    parser.add_argument("--output", type=Path, default=None, help="Output TSV (default: stdout)")
    parser.add_argument("--list-modifications", action="store_true", help="List known modification names and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _write_rows(handle, rows: List[list]) -> None:
    writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
    writer.writerow(TSV_COLUMNS)
    writer.writerows(rows)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_modifications:
        for modification in default_registry():
            print(f"{modification.name}\t{modification.mass:+.6f}\t{modification.type.value}")
        return 0
    if args.fasta is None or not args.tags:
        parser.error("--fasta and at least one --tag are required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        tags = [Tag.from_string(text) for text in args.tags]
        matcher = TagMatcher(args.fixed, args.variable)
        sequence_matching = SequenceMatchingParams(
            matching_type=MatchingType(args.matching),
            max_ptms_per_tag_peptide=args.max_ptms,
        )
        proteins = read_fasta(args.fasta)
        rows = _map_rows(args, tags, matcher, sequence_matching, proteins)
    except (ValueError, KeyError, NotImplementedError, FileNotFoundError) as e:
        logger.error(f"{e}")
        return 2

    if args.output is None:
        _write_rows(sys.stdout, rows)
    else:
        with open(args.output, "w", newline="") as f:
            _write_rows(f, rows)
        logger.info(f"✓ Wrote {len(rows):,} peptides to {args.output}")

    return 0


def _map_rows(args, tags, matcher, sequence_matching, proteins) -> List[list]:
    rows = []
    protein_lengths = {protein.accession: len(protein.sequence) for protein in proteins}
    for text, tag in zip(args.tags, tags):
        mappings = map_tag_to_proteins(
            matcher, tag, proteins, sequence_matching,
            args.tolerance, report_fixed=args.report_fixed,
        )
        for mapping in mappings:
            peptide = mapping.peptide
            modifications = ";".join(
                f"{m.name}@{m.site}{'' if m.variable else '(fixed)'}"
                for m in peptide.modification_matches
            )
            rows.append([
                text,
                mapping.accession,
                mapping.index,
                peptide.sequence,
                peptide.modified_sequence,
                modifications,
                peptide.n_variable_modifications,
                f"{matcher.peptide_mass(peptide, mapping.index, protein_lengths[mapping.accession]):.6f}",
            ])
    return rows


if __name__ == "__main__":
    sys.exit(main())
