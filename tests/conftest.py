"""Shared fixtures: published reliability datasets and small synthetic ones."""

from typing import List, Sequence

import numpy as np
import pytest

from irr.models import NOMINAL, ORDINAL, ObservationMatrix

# Krippendorff (2011), "Computing Krippendorff's Alpha-Reliability":
# four observers, twelve units, "" marks a missing value.
KRIPPENDORFF_2011 = {
    "A": ["1", "2", "3", "3", "2", "1", "4", "1", "2", "", "", ""],
    "B": ["1", "2", "3", "3", "2", "2", "4", "1", "2", "5", "", "3"],
    "C": ["", "3", "3", "3", "2", "3", "4", "2", "2", "5", "1", ""],
    "D": ["1", "2", "3", "3", "2", "4", "4", "1", "2", "5", "1", ""],
}

# Fleiss (1971) style example: ten subjects, fourteen raters, counts per category.
FLEISS_COUNTS = [
    [0, 0, 0, 0, 14],
    [0, 2, 6, 4, 2],
    [0, 0, 3, 5, 6],
    [0, 3, 9, 2, 0],
    [2, 2, 8, 1, 1],
    [7, 7, 0, 0, 0],
    [3, 2, 6, 3, 0],
    [2, 5, 3, 2, 2],
    [6, 5, 2, 1, 0],
    [0, 2, 2, 3, 7],
]


def make_matrix(
    columns: dict,
    variable: str = "var",
    level: str = NOMINAL,
    value_order: Sequence[str] = None,
) -> ObservationMatrix:
    """Build a matrix from {observer: [label per unit]}."""
    observers = list(columns)
    n_units = len(next(iter(columns.values())))
    rows = [
        (f"u{u + 1}", [columns[o][u] for o in observers])
        for u in range(n_units)
    ]
    return ObservationMatrix.from_rows(variable, observers, rows, level=level, value_order=value_order)


def counts_to_matrix(counts: List[List[int]], variable: str = "fleiss") -> ObservationMatrix:
    """Expand per-unit category counts into a fully observed matrix."""
    categories = [f"c{j + 1}" for j in range(len(counts[0]))]
    rows = []
    for i, unit_counts in enumerate(counts):
        labels = [cat for cat, n in zip(categories, unit_counts) for _ in range(n)]
        rows.append((f"s{i + 1}", labels))
    n_raters = sum(counts[0])
    observers = [f"r{k + 1}" for k in range(n_raters)]
    return ObservationMatrix.from_rows(variable, observers, rows, value_order=categories)


@pytest.fixture
def reliability_2011() -> ObservationMatrix:
    return make_matrix(KRIPPENDORFF_2011, variable="example")


@pytest.fixture
def reliability_2011_ordinal() -> ObservationMatrix:
    return make_matrix(
        KRIPPENDORFF_2011,
        variable="example",
        level=ORDINAL,
        value_order=["1", "2", "3", "4", "5"],
    )


@pytest.fixture
def fleiss_1971() -> ObservationMatrix:
    return counts_to_matrix(FLEISS_COUNTS)


@pytest.fixture
def perfect_agreement() -> ObservationMatrix:
    """Three observers, every unit unanimous, two values in use."""
    labels = ["yes", "no"] * 20
    return make_matrix({"A": labels, "B": labels, "C": labels}, variable="perfect")


@pytest.fixture
def binary_two_observers() -> ObservationMatrix:
    """Forty units, two observers, 32 agreements and 8 disagreements."""
    a = ["y"] * 16 + ["n"] * 16 + ["y"] * 4 + ["n"] * 4
    b = ["y"] * 16 + ["n"] * 16 + ["n"] * 4 + ["y"] * 4
    return make_matrix({"A": a, "B": b}, variable="binary")


def random_matrix(rng: np.random.Generator, n_units: int, n_observers: int, values: Sequence[str]) -> ObservationMatrix:
    labels = rng.choice(values, size=(n_observers, n_units))
    return make_matrix({f"o{i}": list(labels[i]) for i in range(n_observers)}, variable="random")
