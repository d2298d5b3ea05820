"""Exceptions raised by the reliability computations."""


class IRRError(Exception):
    """Base class for all reliability-analysis errors."""


class UnsupportedDataError(IRRError, ValueError):
    """The measurement level is not supported by a statistic."""


class DataFormatError(IRRError, ValueError):
    """Input data could not be turned into an observation matrix."""


class BootstrapInvariantError(IRRError, RuntimeError):
    """The bootstrap correction reached a configuration it cannot handle."""
