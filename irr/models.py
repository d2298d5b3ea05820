"""Data models for the reliability calculator."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import DataFormatError

NOMINAL = "nominal"
ORDINAL = "ordinal"
INTERVAL = "interval"
MEASUREMENT_LEVELS = (NOMINAL, ORDINAL, INTERVAL)

# Grid marker for an observer who did not rate a unit
MISSING = -1


@dataclass
class ObservationMatrix:
    """One variable's observations, units by observers.

    Attributes:
        variable: Variable name
        observers: Observer identifiers in order of first appearance
        units: Unit identifiers in order of appearance
        values: Distinct value labels; for ordinal data in declared order
        grid: (n_units, n_observers) int array of value indices, MISSING where absent
        level: Measurement level ("nominal"|"ordinal"|"interval")
    """
    variable: str
    observers: List[str]
    units: List[str]
    values: List[str]
    grid: np.ndarray
    level: str = NOMINAL

    def __post_init__(self):
        if self.level not in MEASUREMENT_LEVELS:
            raise DataFormatError(f"Unknown measurement level: {self.level}")
        if len(set(self.values)) != len(self.values):
            raise DataFormatError(f"Duplicate value labels for variable '{self.variable}'")

        grid = np.array(self.grid, dtype=int, copy=True)
        if grid.size == 0:
            grid = grid.reshape(len(self.units), len(self.observers))
        if grid.shape != (len(self.units), len(self.observers)):
            raise DataFormatError(
                f"Grid shape {grid.shape} does not match "
                f"{len(self.units)} units x {len(self.observers)} observers"
            )
        if grid.size and (grid.min() < MISSING or grid.max() >= len(self.values)):
            raise DataFormatError(f"Value index out of range for variable '{self.variable}'")

        grid.flags.writeable = False
        self.grid = grid
        self.observers = list(self.observers)
        self.units = list(self.units)
        self.values = list(self.values)

    @classmethod
    def from_rows(
        cls,
        variable: str,
        observers: Sequence[str],
        rows: Sequence[Tuple[str, Sequence[Optional[str]]]],
        level: str = NOMINAL,
        value_order: Optional[Sequence[str]] = None,
    ) -> "ObservationMatrix":
        """Build a matrix from raw (unit, labels) rows.

        Empty strings and None are treated as missing. Without a
        value_order, labels are indexed in order of first appearance.

        Args:
            variable: Variable name
            observers: Observer identifiers
            rows: Sequence of (unit_id, [label per observer]) pairs
            level: Measurement level
            value_order: Declared label order (required for ordinal data)

        Returns:
            ObservationMatrix instance
        """
        if level == ORDINAL and value_order is None:
            raise DataFormatError(f"Ordinal variable '{variable}' needs a declared value order")

        values: List[str] = list(value_order) if value_order is not None else []
        index: Dict[str, int] = {v: i for i, v in enumerate(values)}
        n_observers = len(observers)

        units = []
        grid = np.full((len(rows), n_observers), MISSING, dtype=int)
        for u, (unit, labels) in enumerate(rows):
            if len(labels) > n_observers:
                raise DataFormatError(
                    f"Unit '{unit}' has {len(labels)} observations for {n_observers} observers"
                )
            units.append(str(unit))
            for o, label in enumerate(labels):
                if label is None or label == "":
                    continue
                label = str(label)
                if label not in index:
                    if value_order is not None:
                        raise DataFormatError(
                            f"Value '{label}' of unit '{unit}' is not among the declared "
                            f"values of '{variable}'"
                        )
                    index[label] = len(values)
                    values.append(label)
                grid[u, o] = index[label]

        return cls(
            variable=variable,
            observers=list(observers),
            units=units,
            values=values,
            grid=grid,
            level=level,
        )

    def get_value(self, unit: int, observer: int) -> int:
        """Return the value index at (unit, observer), MISSING if absent."""
        return int(self.grid[unit, observer])

    def get_pairwise_data(self, observer_a: int, observer_b: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return the aligned value-index columns of two observers."""
        return self.grid[:, observer_a], self.grid[:, observer_b]

    def values_by_unit(self) -> np.ndarray:
        """Return (n_units, n_values) counts of each value per unit."""
        counts = np.zeros((self.n_units, self.n_values), dtype=int)
        units, observers = np.nonzero(self.grid != MISSING)
        np.add.at(counts, (units, self.grid[units, observers]), 1)
        return counts

    def complete_units(self) -> np.ndarray:
        """Boolean mask of units rated by every observer."""
        return np.all(self.grid != MISSING, axis=1)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the grid as labelled DataFrame (units x observers), NaN for missing."""
        labels = np.array(self.values + [None], dtype=object)
        return pd.DataFrame(
            labels[self.grid],
            index=pd.Index(self.units, name=self.variable),
            columns=self.observers,
        )

    @property
    def n_observers(self) -> int:
        return len(self.observers)

    @property
    def n_units(self) -> int:
        return len(self.units)

    @property
    def n_values(self) -> int:
        return len(self.values)

    @property
    def n_observations(self) -> int:
        return int(np.count_nonzero(self.grid != MISSING))


@dataclass
class ConfidenceInterval:
    """Confidence interval of a statistic at confidence level p.

    NaN bounds with implemented=True mean the interval is undefined for
    the data; implemented=False means the statistic has no interval
    machinery (configured off or unavailable).
    """
    p: float
    low: float
    high: float
    note: Optional[str] = None
    implemented: bool = True

    @classmethod
    def not_implemented(cls, p: float, note: str = "not implemented") -> "ConfidenceInterval":
        return cls(p=p, low=math.nan, high=math.nan, note=note, implemented=False)

    @property
    def is_undefined(self) -> bool:
        return self.implemented and (math.isnan(self.low) or math.isnan(self.high))


@dataclass
class PValue:
    """Significance-test probability for failing to reach a minimum value.

    Attributes:
        p: Probability in [0, 1], or NaN
        statistic_name: Name of a diagnostic test statistic (e.g. "z")
        statistic_value: Value of that diagnostic statistic
        note: Human-readable remark
        implemented: False when the statistic has no significance test
    """
    p: float
    statistic_name: Optional[str] = None
    statistic_value: Optional[float] = None
    note: Optional[str] = None
    implemented: bool = True

    @classmethod
    def not_implemented(cls, note: str = "not implemented") -> "PValue":
        return cls(p=math.nan, note=note, implemented=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "p": self.p,
            "statistic_name": self.statistic_name,
            "statistic_value": self.statistic_value,
            "note": self.note,
            "implemented": self.implemented,
        }


@dataclass
class VariableAnalysis:
    """All statistics computed for one variable."""
    matrix: ObservationMatrix
    statistics: List[Any] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)  # {statistic name: error message}

    @property
    def variable(self) -> str:
        return self.matrix.variable
