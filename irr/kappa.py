"""Cohen's and Fleiss' kappa with large-sample confidence intervals.

References:
    Jacob Cohen (1960). A Coefficient of Agreement for Nominal Scales.
    Educational and Psychological Measurement 20 (1), 37-46.

    Joseph L. Fleiss, Jacob Cohen & B. S. Everitt (1969). Large Sample
    Standard Errors of Kappa and Weighted Kappa. Psychological Bulletin
    72 (5), 323-327.

    Joseph L. Fleiss (1971). Measuring Nominal Scale Agreement Among
    Many Raters. Psychological Bulletin 76 (5), 378-382.

    Kilem Li Gwet (2008). Computing inter-rater reliability and its
    variance in the presence of high agreement. British Journal of
    Mathematical and Statistical Psychology 61 (1), 29-48.
"""

import logging
import math
from typing import List

import numpy as np

from .models import MISSING, ConfidenceInterval, ObservationMatrix, PValue
from .statistic import (
    KAPPA_THRESHOLDS,
    SMALL_SAMPLE_WARNING,
    check_confidence_level,
    normal_interval,
    normal_p_value,
)

logger = logging.getLogger(__name__)

SMALL_SAMPLE_UNITS = 30


def _sqrt(variance: float) -> float:
    # Rounding can push a zero variance slightly below zero
    if math.isnan(variance):
        return math.nan
    return math.sqrt(max(variance, 0.0))


def contingency_table(matrix: ObservationMatrix, observer_a: int, observer_b: int) -> np.ndarray:
    """Count co-occurrences of values for two observers.

    Args:
        matrix: ObservationMatrix instance
        observer_a: Index of the row observer
        observer_b: Index of the column observer

    Returns:
        (n_values, n_values) int array; units missing either observer are skipped
    """
    a, b = matrix.get_pairwise_data(observer_a, observer_b)
    both = (a != MISSING) & (b != MISSING)
    table = np.zeros((matrix.n_values, matrix.n_values), dtype=int)
    np.add.at(table, (a[both], b[both]), 1)
    return table


class CohenKappa:
    """Cohen's kappa between two observers of one variable."""

    name = "Cohen's Kappa"
    letter = "κ"
    threshold_values = KAPPA_THRESHOLDS

    def __init__(self, matrix: ObservationMatrix, observer_a: int, observer_b: int):
        self.variable_name = matrix.variable
        self.observer_a = matrix.observers[observer_a]
        self.observer_b = matrix.observers[observer_b]

        self.table = contingency_table(matrix, observer_a, observer_b)
        self.n = int(self.table.sum())

        if self.n == 0:
            logger.warning(
                "No unit rated by both %s and %s for '%s'",
                self.observer_a, self.observer_b, self.variable_name,
            )
            self.value = math.nan
            self.variance = math.nan
            self.se = math.nan
            return

        n = self.n
        p = self.table / n
        row = p.sum(axis=1)   # observer A marginals
        col = p.sum(axis=0)   # observer B marginals

        fo = float(np.trace(self.table))
        fc = float(np.sum(self.table.sum(axis=1) * self.table.sum(axis=0))) / n

        if fc == n:
            self.value = math.nan
            self.variance = math.nan
            self.se = math.nan
            return

        self.value = (fo - fc) / (n - fc)

        # Eq. 13 of Fleiss, Cohen & Everitt (1969)
        po = fo / n
        pc = fc / n

        diagonal = np.diag(p)
        term1 = float(np.sum(diagonal * ((1 - pc) - (row + col) * (1 - po)) ** 2))

        # weight[i, j] = p_.i + p_j. for cell (i, j)
        weight = col[:, np.newaxis] + row[np.newaxis, :]
        off_diagonal = p * weight ** 2
        np.fill_diagonal(off_diagonal, 0.0)
        term2 = float(off_diagonal.sum()) * (1 - po) ** 2

        term3 = (po * pc - 2 * pc + po) ** 2

        self.variance = (term1 + term2 - term3) / (n * (1 - pc) ** 4)
        self.se = _sqrt(self.variance)

        logger.debug(
            "Cohen's kappa for '%s' (%s, %s): n=%d, po=%.4f, pc=%.4f",
            self.variable_name, self.observer_a, self.observer_b, n, po, pc,
        )

    @property
    def variable(self) -> str:
        return f"{self.variable_name}({self.observer_a},{self.observer_b})"

    @property
    def point_estimate(self) -> float:
        return self.value

    def confidence_interval(self, p: float) -> ConfidenceInterval:
        return normal_interval(self.value, self.se, p)

    def p_value(self, minimum: float) -> PValue:
        return normal_p_value(self.value, self.se, minimum)

    def advisories(self) -> List[str]:
        if self.n < SMALL_SAMPLE_UNITS:
            return [SMALL_SAMPLE_WARNING.format(n=self.n, what="units")]
        return []

    def additional_info(self) -> str:
        return f"variance = {self.variance:.5f}\nn = {self.n}\n"


class FleissKappa:
    """Fleiss' kappa over the units rated by every observer.

    The variance is Gwet's (2008) formula 33 with the sampling fraction
    taken as zero; it makes no random-allocation assumption, so it
    supports intervals and tests against any minimum value. Pass
    variance=False to build the point estimate only, in which case the
    interval and test report "not implemented".
    """

    name = "Fleiss' Kappa"
    letter = "κ"
    threshold_values = KAPPA_THRESHOLDS

    def __init__(self, matrix: ObservationMatrix, variance: bool = True):
        self.variable_name = matrix.variable
        self.has_variance = variance

        complete = matrix.complete_units()
        dropped = int((~complete).sum())
        if dropped:
            logger.warning(
                "Fleiss' kappa for '%s' ignores %d unit(s) with missing observations",
                self.variable_name, dropped,
            )

        # n_ij: unit i, value j
        self.counts = matrix.values_by_unit()[complete]
        self.N = int(complete.sum())
        self.raters = matrix.n_observers

        self.value, self.Pbar, self.Pe = self._estimate()
        self.variance = self._variance() if variance else math.nan
        self.se = _sqrt(self.variance)

    def _estimate(self):
        N, n = self.N, self.raters
        if N == 0 or n < 2:
            return math.nan, math.nan, math.nan

        Pbar = (float(np.sum(self.counts ** 2)) - N * n) / (N * n * (n - 1))
        p_j = self.counts.sum(axis=0) / (N * n)
        Pe = float(np.sum(p_j ** 2))
        if Pe >= 1.0:
            return math.nan, Pbar, Pe
        return (Pbar - Pe) / (1 - Pe), Pbar, Pe

    def _variance(self) -> float:
        N, n = self.N, self.raters
        if math.isnan(self.value) or N < 2:
            return math.nan

        nij = self.counts.astype(float)
        p_j = nij.sum(axis=0) / (N * n)

        pa_i = np.sum(nij * (nij - 1), axis=1) / (n * (n - 1))
        pe_i = nij @ p_j / n
        gamma_i = (pa_i - self.Pe) / (1 - self.Pe)
        gamma_star = gamma_i - 2 * (1 - self.value) * (pe_i - self.Pe) / (1 - self.Pe)

        return float(np.sum((gamma_star - self.value) ** 2)) / (N * (N - 1))

    @property
    def variable(self) -> str:
        return self.variable_name

    @property
    def point_estimate(self) -> float:
        return self.value

    def confidence_interval(self, p: float) -> ConfidenceInterval:
        if not self.has_variance:
            check_confidence_level(p)
            return ConfidenceInterval.not_implemented(p)
        return normal_interval(self.value, self.se, p)

    def p_value(self, minimum: float) -> PValue:
        if not self.has_variance:
            return PValue.not_implemented()
        return normal_p_value(self.value, self.se, minimum)

    def advisories(self) -> List[str]:
        if self.has_variance and self.N < SMALL_SAMPLE_UNITS:
            return [SMALL_SAMPLE_WARNING.format(n=self.N, what="units")]
        return []

    def additional_info(self) -> str:
        lines = []
        if self.has_variance:
            lines.append(f"variance = {self.variance:.5f}")
        lines.append(f"n = {self.N}")
        return "\n".join(lines) + "\n"
