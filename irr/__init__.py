"""Inter-rater reliability statistics with confidence intervals and significance tests."""

from .models import (
    NOMINAL,
    ORDINAL,
    INTERVAL,
    MISSING,
    ObservationMatrix,
    ConfidenceInterval,
    PValue,
    VariableAnalysis,
)
from .errors import IRRError, UnsupportedDataError, DataFormatError, BootstrapInvariantError
from .normal import cdf, inverse_cdf
from .statistic import ReliabilityStatistic
from .kappa import CohenKappa, FleissKappa
from .krippendorff import KrippendorffAlpha
from .bootstrap import BootstrapDistribution, bootstrap_alpha
from .config import AnalysisConfig
from .analysis import analyze_matrix, analyze_all
from .data_transformer import (
    iter_matrices,
    load_matrices,
    parse_text,
    from_long_dataframe,
    from_wide_dataframe,
)
from .report import format_statistic, format_report, results_frame, interpret_alpha

__all__ = [
    'NOMINAL',
    'ORDINAL',
    'INTERVAL',
    'MISSING',
    'ObservationMatrix',
    'ConfidenceInterval',
    'PValue',
    'VariableAnalysis',
    'IRRError',
    'UnsupportedDataError',
    'DataFormatError',
    'BootstrapInvariantError',
    'cdf',
    'inverse_cdf',
    'ReliabilityStatistic',
    'CohenKappa',
    'FleissKappa',
    'KrippendorffAlpha',
    'BootstrapDistribution',
    'bootstrap_alpha',
    'AnalysisConfig',
    'analyze_matrix',
    'analyze_all',
    'iter_matrices',
    'load_matrices',
    'parse_text',
    'from_long_dataframe',
    'from_wide_dataframe',
    'format_statistic',
    'format_report',
    'results_frame',
    'interpret_alpha',
]
