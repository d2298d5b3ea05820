"""Plotly visualization functions for reliability analysis."""

from typing import List, Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.figure_factory as ff
import plotly.graph_objects as go

from irr.kappa import CohenKappa
from irr.krippendorff import KrippendorffAlpha
from irr.models import VariableAnalysis


def truncate_label(label: str, max_length: int = 20) -> str:
    """Truncate a label if it exceeds max_length."""
    if len(label) > max_length:
        return label[:max_length - 3] + "..."
    return label


def plot_estimates(
    summary: pd.DataFrame,
    confidence: float = 0.95,
    title: str = "Reliability Estimates",
    max_label_length: int = 30,
) -> go.Figure:
    """Create horizontal bar chart of point estimates with CI error bars.

    Args:
        summary: DataFrame from irr.report.results_frame
        confidence: Confidence level whose interval columns are drawn
        title: Chart title
        max_label_length: Maximum length for variable labels before truncation

    Returns:
        Plotly Figure
    """
    low_col = f"ci{confidence * 100:g}_low"
    high_col = f"ci{confidence * 100:g}_high"

    df = summary.copy()
    df["label"] = [
        truncate_label(f"{v} [{l}]", max_label_length)
        for v, l in zip(df["variable"], df["letter"])
    ]
    if low_col in df and high_col in df:
        df["error_minus"] = (df["estimate"] - df[low_col]).clip(lower=0)
        df["error_plus"] = (df[high_col] - df["estimate"]).clip(lower=0)
    else:
        df["error_minus"] = np.nan
        df["error_plus"] = np.nan

    df = df.sort_values("estimate", ascending=True)

    color_map = {
        "Krippendorff's alpha-reliability": "#636EFA",
        "Fleiss' Kappa": "#EF553B",
        "Cohen's Kappa": "#00CC96",
    }

    fig = px.bar(
        df,
        x="estimate",
        y="label",
        color="statistic",
        orientation="h",
        error_x="error_plus",
        error_x_minus="error_minus",
        color_discrete_map=color_map,
        title=title,
        labels={"estimate": "Estimate", "label": "Variable", "statistic": "Statistic"},
        hover_data={"variable": True, "label": False},
    )

    # Add threshold lines
    fig.add_vline(
        x=0.667,
        line_dash="dash",
        line_color="orange",
        annotation_text="Tentative (0.667)",
        annotation_position="top",
    )
    fig.add_vline(
        x=0.80,
        line_dash="solid",
        line_color="green",
        annotation_text="Acceptable (0.80)",
        annotation_position="top",
    )

    fig.update_layout(
        xaxis_range=[-1.05, 1.05],
        height=max(400, len(df) * 25),
        showlegend=True,
        legend_title_text="Statistic",
    )

    return fig


def plot_pairwise_kappa_heatmap(
    analysis: VariableAnalysis,
    title: Optional[str] = None,
) -> go.Figure:
    """Create symmetric heatmap of pairwise Cohen's kappa.

    Args:
        analysis: VariableAnalysis holding CohenKappa statistics
        title: Chart title

    Returns:
        Plotly Figure
    """
    observers = analysis.matrix.observers
    n = len(observers)

    matrix = np.eye(n)  # Diagonal = 1.0
    for stat in analysis.statistics:
        if isinstance(stat, CohenKappa):
            i = observers.index(stat.observer_a)
            j = observers.index(stat.observer_b)
            matrix[i, j] = matrix[j, i] = stat.point_estimate

    fig = ff.create_annotated_heatmap(
        z=matrix,
        x=observers,
        y=observers,
        colorscale="RdYlGn",
        showscale=True,
        annotation_text=np.round(matrix, 2).astype(str),
    )

    fig.update_layout(
        title=title or f"Pairwise Cohen's Kappa ({analysis.variable})",
        xaxis_title="Observer",
        yaxis_title="Observer",
        height=400,
    )

    return fig


def plot_coincidences(
    alpha: KrippendorffAlpha,
    table: str = "coincidences",
) -> go.Figure:
    """Create annotated heatmap of the coincidence, expected or delta table.

    Args:
        alpha: KrippendorffAlpha instance
        table: "coincidences", "expected" or "delta"

    Returns:
        Plotly Figure
    """
    frames = {
        "coincidences": alpha.coincidence_frame,
        "expected": alpha.expected_frame,
        "delta": alpha.delta_frame,
    }
    if table not in frames:
        raise ValueError(f"Unknown table: {table}")
    df = frames[table]()
    labels = [str(c) for c in df.columns]

    fig = ff.create_annotated_heatmap(
        z=df.to_numpy(),
        x=labels,
        y=labels,
        colorscale="Blues",
        showscale=True,
        annotation_text=np.round(df.to_numpy(), 2).astype(str),
    )

    fig.update_layout(
        title=f"{table.capitalize()} ({alpha.variable})",
        xaxis_title="Value",
        yaxis_title="Value",
        height=400,
    )

    return fig


def plot_bootstrap_distribution(
    alpha: KrippendorffAlpha,
    confidence: float = 0.95,
    title: Optional[str] = None,
) -> go.Figure:
    """Create bar chart of the bootstrapped alpha distribution.

    Args:
        alpha: KrippendorffAlpha instance with a bootstrap distribution
        confidence: Level of the interval marked on the chart
        title: Chart title

    Returns:
        Plotly Figure
    """
    fig = go.Figure()
    if alpha.distribution is None:
        fig.update_layout(title="Bootstrap disabled")
        return fig

    hist = alpha.distribution.histogram()
    centers = (hist["lower"] + hist["upper"]) / 2

    fig.add_trace(go.Bar(
        x=centers,
        y=hist["proportion"],
        width=0.1,
        marker_color="#636EFA",
        name="Resamples",
        hovertemplate="α ∈ (%{customdata[0]:.1f}, %{customdata[1]:.1f}]<br>p = %{y:.3f}<extra></extra>",
        customdata=hist[["lower", "upper"]].to_numpy(),
    ))

    if not np.isnan(alpha.point_estimate):
        fig.add_vline(x=alpha.point_estimate, line_color="black", annotation_text="α")

    ci = alpha.confidence_interval(confidence)
    if not ci.is_undefined and ci.implemented:
        for bound in (ci.low, ci.high):
            fig.add_vline(x=bound, line_dash="dash", line_color="orange")

    fig.update_layout(
        title=title or (
            f"Bootstrapped α ({alpha.variable}): "
            f"X = {alpha.distribution.resamples}, M = {alpha.distribution.depth}"
        ),
        xaxis_title="Krippendorff's Alpha",
        yaxis_title="Proportion of resamples",
        xaxis_range=[-1.05, 1.05],
        height=350,
    )

    return fig


def color_by_alpha(val: float) -> str:
    """Return CSS color string based on a reliability value.

    Args:
        val: Reliability value

    Returns:
        CSS color string
    """
    if pd.isna(val):
        return "background-color: #f0f0f0"
    elif val >= 0.80:
        return "background-color: #90EE90"  # Light green
    elif val >= 0.667:
        return "background-color: #FFE4B5"  # Light orange
    else:
        return "background-color: #FFB6C1"  # Light red
