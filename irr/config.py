"""Analysis configuration."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from .bootstrap import DEFAULT_RESAMPLES, ProgressCallback

DEFAULT_CONFIDENCE_LEVELS = (0.95, 0.99)


@dataclass
class AnalysisConfig:
    """Settings shared by every statistic of an analysis run.

    Attributes:
        resamples: Bootstrap resamples for alpha (0 disables bootstrapping)
        confidence_levels: Levels at which intervals are reported
        seed: Seed for the bootstrap generator; None draws fresh entropy
        fleiss_variance: Whether Fleiss' kappa gets intervals and tests
        progress: Optional bootstrap progress callback (done, total)
    """
    resamples: int = DEFAULT_RESAMPLES
    confidence_levels: Tuple[float, ...] = DEFAULT_CONFIDENCE_LEVELS
    seed: Optional[int] = None
    fleiss_variance: bool = True
    progress: Optional[ProgressCallback] = None

    def __post_init__(self):
        if self.resamples < 0:
            raise ValueError(f"resamples must be non-negative, got {self.resamples}")
        for p in self.confidence_levels:
            if not 0.0 < p < 1.0:
                raise ValueError(f"Confidence level must be in (0, 1), got {p}")
        self.confidence_levels = tuple(self.confidence_levels)

    def make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    @classmethod
    def from_args(cls, args: Any) -> "AnalysisConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            resamples=args.resamples,
            confidence_levels=tuple(args.confidence) if args.confidence else DEFAULT_CONFIDENCE_LEVELS,
            seed=args.seed,
            fleiss_variance=not args.no_fleiss_variance,
        )
