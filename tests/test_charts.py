"""Tests for the plotly chart builders."""

import numpy as np
import plotly.graph_objects as go
import pytest

from irr.analysis import analyze_matrix
from irr.config import AnalysisConfig
from irr.krippendorff import KrippendorffAlpha
from irr.report import results_frame
from visualization.charts import (
    color_by_alpha,
    plot_bootstrap_distribution,
    plot_coincidences,
    plot_estimates,
    plot_pairwise_kappa_heatmap,
    truncate_label,
)


def test_truncate_label():
    assert truncate_label("short") == "short"
    assert truncate_label("x" * 30, 10) == "xxxxxxx..."


def test_plot_estimates(binary_two_observers):
    analysis = analyze_matrix(binary_two_observers, AnalysisConfig(resamples=200, seed=0))
    fig = plot_estimates(results_frame([analysis]))
    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 3


def test_pairwise_heatmap(reliability_2011):
    analysis = analyze_matrix(reliability_2011, AnalysisConfig(resamples=0))
    fig = plot_pairwise_kappa_heatmap(analysis)
    z = np.array(fig.data[0].z, dtype=float)
    assert z.shape == (4, 4)
    assert np.allclose(z, z.T, equal_nan=True)
    assert np.allclose(np.diag(z), 1.0)


@pytest.mark.parametrize("table", ["coincidences", "expected", "delta"])
def test_plot_coincidences(reliability_2011, table):
    alpha = KrippendorffAlpha(reliability_2011, resamples=0)
    fig = plot_coincidences(alpha, table)
    assert np.array(fig.data[0].z).shape == (5, 5)


def test_plot_coincidences_unknown_table(reliability_2011):
    alpha = KrippendorffAlpha(reliability_2011, resamples=0)
    with pytest.raises(ValueError):
        plot_coincidences(alpha, "observed")


def test_bootstrap_distribution_chart(binary_two_observers):
    alpha = KrippendorffAlpha(binary_two_observers, resamples=300, rng=np.random.default_rng(0))
    fig = plot_bootstrap_distribution(alpha)
    assert len(fig.data[0].x) == 20
    assert "X = 300" in fig.layout.title.text


def test_bootstrap_disabled_chart(binary_two_observers):
    fig = plot_bootstrap_distribution(KrippendorffAlpha(binary_two_observers, resamples=0))
    assert fig.layout.title.text == "Bootstrap disabled"
    assert len(fig.data) == 0


def test_color_by_alpha():
    assert color_by_alpha(float("nan")) == "background-color: #f0f0f0"
    assert color_by_alpha(0.9) == "background-color: #90EE90"
    assert color_by_alpha(0.7) == "background-color: #FFE4B5"
    assert color_by_alpha(0.1) == "background-color: #FFB6C1"
