"""Visualization components for the reliability calculator."""

from .charts import (
    plot_estimates,
    plot_pairwise_kappa_heatmap,
    plot_coincidences,
    plot_bootstrap_distribution,
    color_by_alpha,
)

__all__ = [
    'plot_estimates',
    'plot_pairwise_kappa_heatmap',
    'plot_coincidences',
    'plot_bootstrap_distribution',
    'color_by_alpha',
]
