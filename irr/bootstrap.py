"""Bootstrapped sampling distribution of Krippendorff's alpha.

Follows Krippendorff (2013), "Algorithm for bootstrapping a distribution
for cα". Each resample simulates M pairable comparisons drawn from the
observed coincidences; the alpha of a resample starts at 1 and loses
delta_ck / (M * De) for every drawn pair (c, k).
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd

from .errors import BootstrapInvariantError
from .models import ConfidenceInterval, PValue
from .statistic import check_confidence_level

logger = logging.getLogger(__name__)

DEFAULT_RESAMPLES = 20000

# Upper bound on random draws held in memory at once
CHUNK_DRAWS = 1_000_000

ProgressCallback = Callable[[int, int], None]


@dataclass
class BootstrapDistribution:
    """Sorted bootstrap samples after the degenerate-case correction.

    Attributes:
        samples: Sorted simulated alphas, with removed samples dropped
        resamples: Number of resamples drawn (X)
        depth: Pairable comparisons per resample (M)
        removed: Samples removed by the correction
    """
    samples: np.ndarray
    resamples: int
    depth: int
    removed: int = 0

    def __post_init__(self):
        self.samples.flags.writeable = False

    @property
    def effective(self) -> int:
        """Sample count the probabilities are taken over (X - removed)."""
        return self.resamples - self.removed

    def confidence_interval(self, p: float) -> ConfidenceInterval:
        """Central p mass of the corrected samples."""
        check_confidence_level(p)
        if len(self.samples) == 0:
            return ConfidenceInterval(p=p, low=math.nan, high=math.nan)
        low, high = np.quantile(self.samples, [(1 - p) / 2, (1 + p) / 2])
        return ConfidenceInterval(p=p, low=float(low), high=float(high))

    def p_value(self, minimum: float) -> PValue:
        """Fraction of corrected samples strictly below minimum."""
        if self.effective <= 0:
            return PValue(p=math.nan, note="bootstrapped")
        below = int(np.searchsorted(self.samples, minimum, side="left"))
        return PValue(p=below / self.effective, note="bootstrapped")

    def histogram(self) -> pd.DataFrame:
        """Bin the samples into tenths from -1 to 1.

        Bins are closed on the right; the first bin also takes everything
        below -1.

        Returns:
            DataFrame with columns lower, upper, count, proportion
        """
        edges = np.round(np.linspace(-1.0, 1.0, 21), 1)
        bins = np.searchsorted(edges[1:-1], self.samples, side="left")
        counts = np.bincount(bins, minlength=len(edges) - 1)
        proportion = counts / self.effective if self.effective > 0 else np.full(len(counts), np.nan)
        return pd.DataFrame({
            "lower": edges[:-1],
            "upper": edges[1:],
            "count": counts,
            "proportion": proportion,
        })


def resample_depth(coincidences: np.ndarray, n_total: int, n_observers: int) -> int:
    """Krippendorff's M: min(25 * Q, n * (m - 1) / 2).

    Q is the number of cells with positive coincidences.
    """
    q = int(np.count_nonzero(coincidences > 0))
    return min(25 * q, n_total * (n_observers - 1) // 2)


def correct_samples(
    samples: np.ndarray,
    coincidences: np.ndarray,
    n_total: int,
    depth: int,
) -> Tuple[np.ndarray, int]:
    """Apply the Fourth Step correction to sorted samples.

    With one value agreed upon, every sample at 1 is an artifact of the
    single-value diagonal and is removed. With two, the expected number
    of all-diagonal resamples, round(X * sum_c (o_cc / n)^M), is removed
    from the top samples equal to 1.

    Args:
        samples: Sorted simulated alphas
        coincidences: Coincidence table
        n_total: Number of pairable values (n..)
        depth: Resample depth M

    Returns:
        Tuple of (remaining samples, number removed)

    Raises:
        BootstrapInvariantError: If more than two values have positive
            diagonal coincidences
    """
    diagonal = np.diag(coincidences)
    agreed = int(np.count_nonzero(diagonal > 0))
    at_one = int(np.count_nonzero(samples >= 1))

    if agreed == 0:
        return samples, 0
    if agreed == 1:
        removed = at_one
    elif agreed == 2:
        expected = len(samples) * float(np.sum((diagonal / n_total) ** depth))
        # capped at the samples actually at 1; the same count shrinks the divisor
        removed = min(int(math.floor(expected + 0.5)), at_one)
    else:
        raise BootstrapInvariantError(
            f"Bootstrap correction undefined for {agreed} values with "
            "positive diagonal coincidences"
        )

    return samples[:len(samples) - removed], removed


def bootstrap_alpha(
    coincidences: np.ndarray,
    delta_sq: np.ndarray,
    n_total: int,
    expected_disagreement: float,
    n_observers: int,
    resamples: int = DEFAULT_RESAMPLES,
    rng: Optional[np.random.Generator] = None,
    progress: Optional[ProgressCallback] = None,
) -> BootstrapDistribution:
    """Simulate the sampling distribution of alpha.

    Args:
        coincidences: (n_values, n_values) coincidence table
        delta_sq: Distance metric of the same shape
        n_total: Number of pairable values (n..)
        expected_disagreement: De, the alpha denominator
        n_observers: Number of observers (m)
        resamples: Number of resamples (X)
        rng: numpy Generator; a fresh unseeded one when None
        progress: Optional callback invoked as progress(done, total)

    Returns:
        BootstrapDistribution instance
    """
    rng = rng if rng is not None else np.random.default_rng()
    depth = resample_depth(coincidences, n_total, n_observers)
    logger.debug("Bootstrapping alpha: X=%d, M=%d", resamples, depth)

    if depth <= 0 or not expected_disagreement > 0:
        logger.warning("Bootstrap distribution undefined (M=%d, De=%s)", depth, expected_disagreement)
        return BootstrapDistribution(
            samples=np.array([], dtype=float),
            resamples=resamples,
            depth=depth,
            removed=resamples,
        )

    # Cells are visited in row-major order of the table
    cumulative = np.cumsum(coincidences.ravel()) / n_total
    penalties = delta_sq.ravel() / (depth * expected_disagreement)
    last_cell = len(cumulative) - 1

    samples = np.empty(resamples, dtype=float)
    batch = max(1, min(resamples, CHUNK_DRAWS // depth))
    for start in range(0, resamples, batch):
        stop = min(start + batch, resamples)
        draws = rng.random((stop - start, depth))
        cells = np.minimum(np.searchsorted(cumulative, draws, side="left"), last_cell)
        samples[start:stop] = 1.0 - penalties[cells].sum(axis=1)
        if progress is not None:
            progress(stop, resamples)

    samples.sort()
    samples, removed = correct_samples(samples, coincidences, n_total, depth)
    if removed:
        logger.debug("Bootstrap correction removed %d of %d samples", removed, resamples)

    return BootstrapDistribution(
        samples=samples,
        resamples=resamples,
        depth=depth,
        removed=removed,
    )
