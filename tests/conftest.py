"""Pytest configuration for AlphaPeptTag tests.

Common fixtures: matching parameters, matchers for typical modification
configurations and a small protein collection.
"""

import pytest


@pytest.fixture
def sequence_matching():
    """I/L-aware residue matching without a modification cap."""
    from alphapepttag.sequence_matching import SequenceMatchingParams
    return SequenceMatchingParams()


@pytest.fixture
def string_matching():
    """Exact residue matching."""
    from alphapepttag.sequence_matching import SequenceMatchingParams
    return SequenceMatchingParams.string_matching()


@pytest.fixture
def plain_matcher():
    """Matcher without any modification."""
    from alphapepttag.search import TagMatcher
    return TagMatcher([], [])


@pytest.fixture
def standard_matcher():
    """Typical search settings: fixed carbamidomethyl C, variable oxidation M."""
    from alphapepttag.search import TagMatcher
    return TagMatcher(["Carbamidomethylation of C"], ["Oxidation of M"])


@pytest.fixture
def proteins():
    """Small protein collection as (accession, sequence) tuples."""
    return [
        ("P1", "MKAPPEPKR"),
        ("P2", "AGGPEPTIDEK"),
        ("P3", "LLLLLLLL"),
    ]


@pytest.fixture
def h2o_mass():
    """Water mass constant."""
    from alphapepttag.constants import H2O_MASS
    return H2O_MASS
