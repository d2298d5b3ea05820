"""Tests for running all statistics on a variable, and the analysis config."""

import pytest

from irr.analysis import analyze_all, analyze_matrix
from irr.config import AnalysisConfig
from irr.errors import BootstrapInvariantError
from irr.kappa import CohenKappa, FleissKappa
from irr.krippendorff import KrippendorffAlpha
from irr.models import INTERVAL

from conftest import make_matrix


def test_statistics_in_report_order(reliability_2011):
    analysis = analyze_matrix(reliability_2011, AnalysisConfig(resamples=0))
    stats = analysis.statistics
    # alpha, Fleiss, then C(4, 2) pairs
    assert len(stats) == 1 + 1 + 6
    assert isinstance(stats[0], KrippendorffAlpha)
    assert isinstance(stats[1], FleissKappa)
    assert all(isinstance(s, CohenKappa) for s in stats[2:])
    assert [s.variable for s in stats[2:4]] == ["example(A,B)", "example(A,C)"]
    assert analysis.failures == {}
    assert analysis.variable == "example"


def test_interval_level_skips_alpha_only():
    matrix = make_matrix({"A": ["1", "2", "3"], "B": ["1", "2", "2"], "C": ["1", "3", "3"]}, level=INTERVAL)
    analysis = analyze_matrix(matrix, AnalysisConfig(resamples=0))
    assert not any(isinstance(s, KrippendorffAlpha) for s in analysis.statistics)
    assert len(analysis.statistics) == 1 + 3
    assert "Krippendorff's alpha-reliability" in analysis.failures


def test_bootstrap_failure_propagates(reliability_2011):
    with pytest.raises(BootstrapInvariantError):
        analyze_matrix(reliability_2011, AnalysisConfig(resamples=100, seed=0))


def test_config_is_applied(fleiss_1971, binary_two_observers):
    config = AnalysisConfig(resamples=0, fleiss_variance=False)
    fleiss = analyze_matrix(fleiss_1971, config).statistics[1]
    assert not fleiss.has_variance

    seeded = AnalysisConfig(resamples=300, seed=5)
    first = analyze_matrix(binary_two_observers, seeded).statistics[0]
    second = analyze_matrix(binary_two_observers, seeded).statistics[0]
    assert first.confidence_interval(0.95) == second.confidence_interval(0.95)


def test_progress_reaches_total(binary_two_observers):
    seen = []
    config = AnalysisConfig(resamples=120, seed=0, progress=lambda done, total: seen.append((done, total)))
    analyze_matrix(binary_two_observers, config)
    assert seen[-1] == (120, 120)


def test_analyze_all(binary_two_observers, perfect_agreement):
    analyses = list(analyze_all([binary_two_observers, perfect_agreement], AnalysisConfig(resamples=0)))
    assert [a.variable for a in analyses] == ["binary", "perfect"]


@pytest.mark.parametrize("kwargs", [
    {"resamples": -1},
    {"confidence_levels": (0.95, 1.0)},
    {"confidence_levels": (0.0,)},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        AnalysisConfig(**kwargs)


def test_config_defaults():
    config = AnalysisConfig()
    assert config.resamples == 20000
    assert config.confidence_levels == (0.95, 0.99)
    assert config.fleiss_variance
    assert AnalysisConfig(confidence_levels=[0.9]).confidence_levels == (0.9,)
