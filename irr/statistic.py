"""Common interface of the reliability statistics."""

import math
from typing import List, Protocol, runtime_checkable

import numpy as np

from .models import ConfidenceInterval, PValue
from .normal import cdf, inverse_cdf

KAPPA_THRESHOLDS = [0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1, 0.0]
ALPHA_THRESHOLDS = [0.9, 0.8, 0.7, 0.667, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1, 0.0]

SMALL_SAMPLE_WARNING = (
    "The sample is small ({n} {what}). The assumptions underlying the "
    "variance are probably invalid, so the confidence intervals and "
    "significance tests are probably invalid as well."
)


@runtime_checkable
class ReliabilityStatistic(Protocol):
    """Capabilities shared by every agreement coefficient.

    The report layer only talks to statistics through this protocol.
    """

    name: str
    letter: str
    threshold_values: List[float]

    @property
    def variable(self) -> str:
        """Variable label, including observer names where relevant."""

    @property
    def point_estimate(self) -> float:
        """The coefficient for the observed data (NaN if undefined)."""

    def confidence_interval(self, p: float) -> ConfidenceInterval:
        """Confidence interval at confidence level p in (0, 1)."""

    def p_value(self, minimum: float) -> PValue:
        """Probability that the true coefficient is at or below minimum."""

    def advisories(self) -> List[str]:
        """Advisory warnings (e.g. small samples) for the results."""

    def additional_info(self) -> str:
        """Supplementary diagnostics as plain text."""


def check_confidence_level(p: float) -> None:
    if not 0.0 < p < 1.0:
        raise ValueError(f"Confidence level must be in (0, 1), got {p}")


def normal_interval(value: float, se: float, p: float) -> ConfidenceInterval:
    """Two-sided normal-theory interval clamped to [-1, 1]."""
    check_confidence_level(p)
    if math.isnan(value) or math.isnan(se):
        return ConfidenceInterval(p=p, low=math.nan, high=math.nan)
    z = inverse_cdf(1 - (1 - p) / 2)
    return ConfidenceInterval(
        p=p,
        low=max(-1.0, value - z * se),
        high=min(1.0, value + z * se),
    )


def normal_p_value(value: float, se: float, minimum: float) -> PValue:
    """One-tailed upper-tail test of value against minimum."""
    with np.errstate(divide="ignore", invalid="ignore"):
        z = float(np.divide(np.float64(value) - minimum, np.float64(se)))
    return PValue(p=1 - cdf(z), statistic_name="z", statistic_value=z, note="upper tail")
