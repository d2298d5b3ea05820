"""Run every reliability statistic on one variable."""

import itertools
import logging
from typing import Iterable, Iterator, Optional

from .config import AnalysisConfig
from .errors import UnsupportedDataError
from .kappa import CohenKappa, FleissKappa
from .krippendorff import KrippendorffAlpha
from .models import ObservationMatrix, VariableAnalysis

logger = logging.getLogger(__name__)


def analyze_matrix(
    matrix: ObservationMatrix,
    config: Optional[AnalysisConfig] = None,
) -> VariableAnalysis:
    """Compute Krippendorff's alpha, Fleiss' kappa and pairwise Cohen's kappas.

    An unsupported measurement level only skips alpha and is recorded in
    the failures. Bootstrap invariant violations propagate and end the
    analysis of the variable.

    Args:
        matrix: ObservationMatrix instance
        config: AnalysisConfig; defaults when None

    Returns:
        VariableAnalysis with the statistics in report order
    """
    config = config or AnalysisConfig()
    analysis = VariableAnalysis(matrix=matrix)
    logger.info(
        "Analyzing '%s': %d units, %d observers, %d values (%s)",
        matrix.variable, matrix.n_units, matrix.n_observers, matrix.n_values, matrix.level,
    )

    try:
        analysis.statistics.append(KrippendorffAlpha(
            matrix,
            resamples=config.resamples,
            rng=config.make_rng(),
            progress=config.progress,
        ))
    except UnsupportedDataError as e:
        logger.error("Skipping %s for '%s': %s", KrippendorffAlpha.name, matrix.variable, e)
        analysis.failures[KrippendorffAlpha.name] = str(e)

    analysis.statistics.append(FleissKappa(matrix, variance=config.fleiss_variance))

    for a, b in itertools.combinations(range(matrix.n_observers), 2):
        analysis.statistics.append(CohenKappa(matrix, a, b))

    return analysis


def analyze_all(
    matrices: Iterable[ObservationMatrix],
    config: Optional[AnalysisConfig] = None,
) -> Iterator[VariableAnalysis]:
    """Analyze each matrix in turn."""
    for matrix in matrices:
        yield analyze_matrix(matrix, config)
