"""Krippendorff's alpha-reliability for nominal and ordinal data.

References:
    Klaus Krippendorff (2011). Computing Krippendorff's Alpha-Reliability.
    Klaus Krippendorff (2013). Algorithm for bootstrapping a distribution for cα.
    Klaus Krippendorff (1980). Content Analysis. An Introduction to Its Methodology.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .bootstrap import DEFAULT_RESAMPLES, BootstrapDistribution, ProgressCallback, bootstrap_alpha
from .errors import UnsupportedDataError
from .models import NOMINAL, ORDINAL, ConfidenceInterval, ObservationMatrix, PValue
from .statistic import ALPHA_THRESHOLDS, SMALL_SAMPLE_WARNING, check_confidence_level

logger = logging.getLogger(__name__)

SUPPORTED_LEVELS = (NOMINAL, ORDINAL)

SMALL_SAMPLE_OBSERVATIONS = 30


def coincidence_table(values_by_unit: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Build the coincidence table from per-unit value counts.

    o_ck = sum over units u with m_u > 1 of n_uc * (n_uk - [c == k]) / (m_u - 1)

    Args:
        values_by_unit: (n_units, n_values) counts n_uc

    Returns:
        Tuple of (coincidences, value sums n_c over pairable units)
    """
    unit_sums = values_by_unit.sum(axis=1)
    pairable = values_by_unit[unit_sums > 1]
    weights = 1.0 / (unit_sums[unit_sums > 1] - 1)

    weighted = pairable * weights[:, np.newaxis]
    raw = weighted.T @ pairable
    # (w * n_c) * n_k and (w * n_k) * n_c may round apart
    coincidences = (raw + raw.T) / 2 - np.diag(weighted.sum(axis=0))
    return coincidences, pairable.sum(axis=0)


def expected_table(value_sums: np.ndarray) -> np.ndarray:
    """e_ck = n_c * (n_k - [c == k]) / (n - 1)."""
    n_total = int(value_sums.sum())
    if n_total <= 1:
        return np.full((len(value_sums), len(value_sums)), np.nan)
    sums = value_sums.astype(float)
    return (np.outer(sums, sums) - np.diag(sums)) / (n_total - 1)


def nominal_metric(n_values: int) -> np.ndarray:
    """delta^2 is 1 between distinct values, 0 on the diagonal."""
    return 1.0 - np.eye(n_values)


def ordinal_metric(value_sums: np.ndarray) -> np.ndarray:
    """Rank-based delta^2 for values in declared order.

    delta_ck = (sum_{g=c..k} n_g - (n_c + n_k) / 2)^2
    """
    sums = value_sums.astype(float)
    cumulative = np.cumsum(sums)
    c = np.arange(len(sums))[:, np.newaxis]
    k = np.arange(len(sums))[np.newaxis, :]
    lo = np.minimum(c, k)
    hi = np.maximum(c, k)
    between = cumulative[hi] - cumulative[lo] + sums[lo]
    return (between - (sums[c] + sums[k]) / 2) ** 2


class KrippendorffAlpha:
    """Krippendorff's alpha with a bootstrapped sampling distribution."""

    name = "Krippendorff's alpha-reliability"
    letter = "α"
    threshold_values = ALPHA_THRESHOLDS

    def __init__(
        self,
        matrix: ObservationMatrix,
        resamples: int = DEFAULT_RESAMPLES,
        rng: Optional[np.random.Generator] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        if matrix.level not in SUPPORTED_LEVELS:
            raise UnsupportedDataError(
                f"Only nominal and ordinal scale are implemented for "
                f"Krippendorff's alpha, '{matrix.variable}' is {matrix.level}"
            )

        self.variable_name = matrix.variable
        self.level = matrix.level
        self.values = list(matrix.values)
        self.n_units = matrix.n_units
        self.n_observers = matrix.n_observers

        self.values_by_unit = matrix.values_by_unit()
        self.unit_sums = self.values_by_unit.sum(axis=1)
        self.coincidences, self.value_sums = coincidence_table(self.values_by_unit)
        self.n_total = int(self.value_sums.sum())
        self.expected = expected_table(self.value_sums)

        if self.level == ORDINAL:
            self.delta_sq = ordinal_metric(self.value_sums)
        else:
            self.delta_sq = nominal_metric(len(self.values))

        self.observed_disagreement, self.expected_disagreement = self._disagreements()
        with np.errstate(divide="ignore", invalid="ignore"):
            self.value = float(1 - np.float64(self.observed_disagreement) / self.expected_disagreement)
        if not math.isfinite(self.value):
            logger.warning("Krippendorff's alpha is undefined for '%s'", self.variable_name)
            self.value = math.nan

        logger.debug(
            "Alpha for '%s': %d pairable values, Do=%s, De=%s",
            self.variable_name, self.n_total,
            self.observed_disagreement, self.expected_disagreement,
        )

        self.resamples = resamples
        self.distribution: Optional[BootstrapDistribution] = None
        if resamples > 0:
            self.distribution = bootstrap_alpha(
                self.coincidences,
                self.delta_sq,
                self.n_total,
                self.expected_disagreement,
                self.n_observers,
                resamples=resamples,
                rng=rng,
                progress=progress,
            )

    def _disagreements(self) -> Tuple[float, float]:
        if self.n_total <= 1:
            return math.nan, math.nan
        observed = float(np.sum(self.coincidences * self.delta_sq)) / self.n_total
        expected = float(np.sum(self.expected * self.delta_sq)) / self.n_total
        return observed, expected

    @property
    def variable(self) -> str:
        return self.variable_name

    @property
    def point_estimate(self) -> float:
        return self.value

    @property
    def depth(self) -> int:
        return self.distribution.depth if self.distribution is not None else 0

    def confidence_interval(self, p: float) -> ConfidenceInterval:
        if self.distribution is None:
            check_confidence_level(p)
            return ConfidenceInterval.not_implemented(p, note="bootstrap disabled")
        return self.distribution.confidence_interval(p)

    def p_value(self, minimum: float) -> PValue:
        if self.distribution is None:
            return PValue.not_implemented(note="bootstrap disabled")
        return self.distribution.p_value(minimum)

    def advisories(self) -> List[str]:
        if self.n_total < SMALL_SAMPLE_OBSERVATIONS:
            return [SMALL_SAMPLE_WARNING.format(n=self.n_total, what="pairable observations")]
        return []

    def coincidence_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.coincidences, index=self.values, columns=self.values)

    def expected_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.expected, index=self.values, columns=self.values)

    def delta_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.delta_sq, index=self.values, columns=self.values)

    def additional_info(self) -> str:
        sections = []
        if self.distribution is not None:
            sections.append(format_distribution(self.distribution))

        sections.append(f"Data is {self.level}.")
        sections.append("\n".join([
            "Data counts:",
            f" {self.n_units:5d} units",
            f" {self.n_observers:5d} observers",
            f" {len(self.values):5d} values",
            f" {self.n_total:5d} observations",
        ]))

        coincidences = self.coincidence_frame()
        coincidences["total"] = coincidences.sum(axis=1)
        sections.append("Coincidences:\n" + coincidences.to_string(float_format="{:.3f}".format))
        sections.append("Expected coincidences:\n" + self.expected_frame().to_string(float_format="{:.3f}".format))
        sections.append("Delta:\n" + self.delta_frame().to_string(float_format="{:.3f}".format))
        return "\n\n".join(sections) + "\n"


def format_distribution(distribution: BootstrapDistribution, width: int = 60) -> str:
    """Render the bootstrap histogram with one star per 1/width of mass."""
    lines = [
        f"Bootstrapped sampling distribution "
        f"(X = {distribution.resamples}, M = {distribution.depth}):"
    ]
    for i, row in distribution.histogram().iterrows():
        opening = "[" if i == 0 else "]"
        line = f"α ∈ {opening}{row['lower']: 3.1f}, {row['upper']: 3.1f}] "
        proportion = row["proportion"]
        if proportion >= 0.01:
            line += "*" * int(math.ceil(proportion * width)) + f" {proportion:4.2f}"
        lines.append(line.rstrip())
    return "\n".join(lines)
