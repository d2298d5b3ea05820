"""Plain-text and tabular reporting of reliability results."""

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIDENCE_LEVELS
from .models import VariableAnalysis
from .statistic import ReliabilityStatistic


def interpret_alpha(alpha: float) -> Tuple[str, str]:
    """Interpret a reliability value according to Krippendorff's thresholds.

    Args:
        alpha: Reliability coefficient

    Returns:
        Tuple of (interpretation label, color for display)
    """
    if alpha is None or np.isnan(alpha):
        return "Cannot compute", "gray"
    elif alpha >= 0.80:
        return "Acceptable", "green"
    elif alpha >= 0.667:
        return "Tentative", "orange"
    else:
        return "Insufficient", "red"


def _fmt(value: float, spec: str = " .3f") -> str:
    if value is None or math.isnan(value):
        return "  NaN" if spec.startswith(" ") else "NaN"
    return format(value, spec)


def format_statistic(
    stat: ReliabilityStatistic,
    confidence_levels: Sequence[float] = DEFAULT_CONFIDENCE_LEVELS,
) -> str:
    """Render one statistic: estimate, intervals, significance tests, diagnostics.

    Args:
        stat: Any ReliabilityStatistic
        confidence_levels: Levels at which to report intervals

    Returns:
        Report text
    """
    lines = [
        f"======= {stat.name} =======",
        f"Variable: {stat.variable}",
        f"{stat.letter} = {_fmt(stat.point_estimate)}",
        "",
        "Confidence intervals:",
    ]

    for p in confidence_levels:
        ci = stat.confidence_interval(p)
        line = f"{p * 100:g} % CI {_fmt(ci.low)} to {_fmt(ci.high)}"
        if ci.note:
            line += f" ({ci.note})"
        lines.append(line)

    lines.append("")
    lines.append("Significance tests:")
    for minimum in stat.threshold_values:
        pv = stat.p_value(minimum)
        line = f"{stat.letter} ≤ {minimum:5.3f} p = {_fmt(pv.p, '5.3f')}"
        if pv.statistic_name is not None and pv.note is not None:
            line += f" ({pv.statistic_name} = {_fmt(pv.statistic_value, ' 7.3f')}, {pv.note})"
        elif pv.statistic_name is not None:
            line += f" ({pv.statistic_name} = {_fmt(pv.statistic_value, ' 7.3f')})"
        elif pv.note is not None:
            line += f" ({pv.note})"
        lines.append(line)

    advisories = stat.advisories()
    if advisories:
        lines.append("")
        for warning in advisories:
            lines.append(f"WARNING: {warning}")

    lines.append("")
    lines.append(stat.additional_info().rstrip("\n"))
    return "\n".join(lines) + "\n"


def format_analysis(
    analysis: VariableAnalysis,
    confidence_levels: Sequence[float] = DEFAULT_CONFIDENCE_LEVELS,
) -> str:
    """Render every statistic of one variable, then any skipped statistics."""
    parts = [format_statistic(stat, confidence_levels) for stat in analysis.statistics]
    for name, message in analysis.failures.items():
        parts.append(f"======= {name} =======\nVariable: {analysis.variable}\nNot computed: {message}\n")
    return "\n".join(parts)


def format_report(
    analyses: Iterable[VariableAnalysis],
    confidence_levels: Sequence[float] = DEFAULT_CONFIDENCE_LEVELS,
) -> str:
    """Render the full report for several variables."""
    return "\n".join(format_analysis(a, confidence_levels) for a in analyses)


def results_frame(
    analyses: Iterable[VariableAnalysis],
    confidence_levels: Sequence[float] = DEFAULT_CONFIDENCE_LEVELS,
) -> pd.DataFrame:
    """Summarize all statistics as one row each.

    Args:
        analyses: Analyses to summarize
        confidence_levels: Levels whose interval bounds become columns

    Returns:
        DataFrame with variable, statistic, estimate, interpretation and CI columns
    """
    records: List[dict] = []
    for analysis in analyses:
        for stat in analysis.statistics:
            record = {
                "variable": stat.variable,
                "statistic": stat.name,
                "letter": stat.letter,
                "estimate": stat.point_estimate,
                "interpretation": interpret_alpha(stat.point_estimate)[0],
            }
            for p in confidence_levels:
                ci = stat.confidence_interval(p)
                record[f"ci{p * 100:g}_low"] = ci.low
                record[f"ci{p * 100:g}_high"] = ci.high
            records.append(record)
    return pd.DataFrame(records)
