"""Tests for the alphapepttag-map command line."""

import csv

import pytest

from alphapepttag.cli import TSV_COLUMNS, build_parser, main
from alphapepttag.tags import Tag


@pytest.fixture
def fasta_file(tmp_path):
    path = tmp_path / "db.fasta"
    path.write_text(">sp|P00001|TEST1_HUMAN\nMKAPPEPKR\n>sp|P00002|TEST2_HUMAN\nAMPEPK\n")
    return path


def _read_rows(path):
    with open(path, newline="") as f:
        return list(csv.DictReader(f, delimiter="\t"))


class TestParser:
    """Test argument defaults."""

    def test_defaults(self):
        args = build_parser().parse_args(["--fasta", "db.fasta", "--tag", "PEP"])
        assert args.tags == ["PEP"]
        assert args.fixed == []
        assert args.tolerance == 0.02
        assert args.matching == "indistinguishable"
        assert not args.report_fixed


class TestMain:
    """Test end-to-end runs."""

    def test_write_tsv(self, fasta_file, tmp_path):
        """Test mappings are written as TSV rows."""
        output = tmp_path / "out.tsv"
        code = main([
            "--fasta", str(fasta_file),
            "--tag", "<97.053>PEP<128.095>",
            "--output", str(output),
        ])
        assert code == 0

        rows = _read_rows(output)
        assert list(rows[0].keys()) == TSV_COLUMNS
        assert len(rows) == 1
        assert rows[0]["accession"] == "P00001"
        assert rows[0]["start"] == "3"
        assert rows[0]["sequence"] == "PPEPK"
        assert rows[0]["n_variable"] == "0"

    def test_modifications_column(self, fasta_file, tmp_path):
        """Test variable and fixed modifications are listed."""
        output = tmp_path / "out.tsv"
        code = main([
            "--fasta", str(fasta_file),
            "--tag", "<147.0354>PEP",
            "--variable", "Oxidation of M",
            "--fixed", "Acetylation of protein N-term",
            "--tolerance", "0.02",
            "--output", str(output),
        ])
        assert code == 0

        rows = _read_rows(output)
        assert [r["sequence"] for r in rows] == ["MPEP"]
        assert rows[0]["modifications"] == "Oxidation of M@1"
        assert rows[0]["modified_sequence"] == "M[Oxidation of M]PEP"
        assert rows[0]["n_variable"] == "1"

    def test_report_fixed(self, fasta_file, tmp_path):
        """Test --report-fixed adds fixed modifications to the rows."""
        output = tmp_path / "out.tsv"
        code = main([
            "--fasta", str(fasta_file),
            "--tag", "PEPK",
            "--fixed", "Carbamylation of K",
            "--report-fixed",
            "--output", str(output),
        ])
        assert code == 0

        rows = _read_rows(output)
        assert [r["sequence"] for r in rows] == ["PEPK", "PEPK"]
        assert all(r["modifications"] == "Carbamylation of K@4(fixed)" for r in rows)

    @pytest.mark.parametrize("report_fixed", [False, True])
    def test_mass_includes_fixed_modifications(self, tmp_path, report_fixed):
        """Test the mass column carries fixed modifications whether reported or not."""
        fasta = tmp_path / "cys.fasta"
        fasta.write_text(">P1\nAKCPEPK\n")
        output = tmp_path / "out.tsv"
        argv = [
            "--fasta", str(fasta),
            "--tag", "<160.030649>PEP",
            "--fixed", "Carbamidomethylation of C",
            "--output", str(output),
        ]
        if report_fixed:
            argv.append("--report-fixed")
        assert main(argv) == 0

        rows = _read_rows(output)
        assert [r["sequence"] for r in rows] == ["CPEP"]
        expected = Tag.from_string("<160.030649>PEP").get_mass()
        assert abs(float(rows[0]["mass"]) - expected) < 1e-3

    def test_stdout(self, fasta_file, capsys):
        """Test rows go to stdout without --output."""
        code = main(["--fasta", str(fasta_file), "--tag", "PEPK"])
        assert code == 0
        lines = capsys.readouterr().out.strip().split("\n")
        assert lines[0].split("\t") == TSV_COLUMNS
        assert len(lines) == 3

    def test_list_modifications(self, capsys):
        """Test the modification listing."""
        assert main(["--list-modifications"]) == 0
        assert "Oxidation of M" in capsys.readouterr().out

    @pytest.mark.parametrize("extra", [
        ["--tag", "PEP", "--variable", "Oxidation of Z"],
        ["--tag", "pep"],
        ["--tag", "<97.05>"],
    ])
    def test_configuration_errors(self, fasta_file, extra):
        """Test bad modifications or tags end with exit code 2."""
        assert main(["--fasta", str(fasta_file)] + extra) == 2

    def test_missing_fasta(self, tmp_path):
        """Test a missing database ends with exit code 2."""
        assert main(["--fasta", str(tmp_path / "missing.fasta"), "--tag", "PEP"]) == 2

    def test_missing_arguments(self):
        """Test --fasta and --tag are required for mapping."""
        with pytest.raises(SystemExit):
            main(["--tag", "PEP"])
