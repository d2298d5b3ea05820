"""Loading observation data into ObservationMatrix instances.

Block text format, one block per variable:

    quality,obsA,obsB,obsC
    doc1,Low,Mid,
    doc2,High,High,High
    ,ordinal,Low,Mid,High

The header names the variable and the observers, each following line is
a unit and its observations (empty cell = missing). A block ends at an
empty line, a line starting with a comma, or end of input. A terminating
comma line may declare the measurement level, followed by the declared
value order for ordinal data.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, TextIO, Union

import pandas as pd

from .errors import DataFormatError
from .models import MEASUREMENT_LEVELS, NOMINAL, ORDINAL, ObservationMatrix

logger = logging.getLogger(__name__)


def _is_blank(line: str) -> bool:
    return line.strip().strip(",").strip() == ""


def _split(line: str) -> List[str]:
    return next(csv.reader([line]))


def _parse_declaration(fields: Sequence[str], line_number: int):
    """Return (level, value order) from a terminating comma line."""
    declared = [f.strip() for f in fields if f.strip()]
    if not declared:
        return NOMINAL, None
    level = declared[0].lower()
    if level not in MEASUREMENT_LEVELS:
        raise DataFormatError(f"Unknown measurement level '{declared[0]}' on line {line_number}")
    if level == ORDINAL:
        if len(declared) < 2:
            raise DataFormatError(f"Ordinal declaration without values on line {line_number}")
        return level, declared[1:]
    return level, None


def parse_matrix(lines: Iterator[str], start_line: int = 0) -> Optional[ObservationMatrix]:
    """Parse the next variable block from an iterator of lines.

    Args:
        lines: Iterator over text lines (consumed up to the block end)
        start_line: Line number of the first line, for error messages

    Returns:
        ObservationMatrix, or None when the input holds no further block
    """
    line_number = start_line
    header = None
    for raw in lines:
        line_number += 1
        line = raw.rstrip("\r\n")
        if not _is_blank(line):
            header = _split(line)
            break
    if header is None:
        return None

    variable = header[0].strip()
    observers = [o.strip() for o in header[1:]]
    if not variable or not observers:
        raise DataFormatError(f"Header without variable name or observers on line {line_number}")

    rows = []
    level, value_order = NOMINAL, None
    for raw in lines:
        line_number += 1
        line = raw.rstrip("\r\n")
        if line == "":
            break
        fields = _split(line)
        if line.startswith(","):
            level, value_order = _parse_declaration(fields[1:], line_number)
            break
        if len(fields) < 2:
            continue
        cells = [f.strip() for f in fields[1:len(observers) + 1]]
        if len(fields) > len(observers) + 1 and any(f.strip() for f in fields[len(observers) + 1:]):
            raise DataFormatError(
                f"Line {line_number} has more observations than the {len(observers)} observers"
            )
        rows.append((fields[0].strip(), cells))

    logger.debug("Parsed block '%s' with %d units", variable, len(rows))
    return ObservationMatrix.from_rows(variable, observers, rows, level=level, value_order=value_order)


def iter_matrices(stream: Union[TextIO, Iterable[str]]) -> Iterator[ObservationMatrix]:
    """Yield one ObservationMatrix per block of a text stream."""
    lines = iter(stream)
    while True:
        matrix = parse_matrix(lines)
        if matrix is None:
            return
        yield matrix


def load_matrices(source: Union[str, Path, TextIO]) -> List[ObservationMatrix]:
    """Read all blocks from a path or open text stream."""
    if hasattr(source, "read"):
        return list(iter_matrices(source))
    with open(source, encoding="utf-8", newline="") as f:
        return list(iter_matrices(f))


def parse_text(text: str) -> List[ObservationMatrix]:
    """Parse all blocks of an in-memory string."""
    return list(iter_matrices(io.StringIO(text)))


def load_table(file: Any) -> pd.DataFrame:
    """Load a CSV or Excel file (path or uploaded file object) as strings.

    Args:
        file: File path or file-like object with a name

    Returns:
        DataFrame with all cells read as strings, NaN for empty cells
    """
    if hasattr(file, "seek"):
        file.seek(0)

    name = file.name if hasattr(file, "name") else str(file)

    if name.endswith(".xlsx") or name.endswith(".xls"):
        df = pd.read_excel(file, dtype=str)
    elif name.endswith(".csv"):
        df = pd.read_csv(file, dtype=str)
    else:
        raise DataFormatError(f"Unsupported file format: {name}")

    if hasattr(file, "seek"):
        file.seek(0)
    return df


def _cell(value: Any) -> Optional[str]:
    if pd.isna(value):
        return None
    return str(value).strip()


def from_long_dataframe(
    df: pd.DataFrame,
    variable_levels: Optional[Dict[str, str]] = None,
    value_orders: Optional[Dict[str, Sequence[str]]] = None,
) -> List[ObservationMatrix]:
    """Build one matrix per variable from long-format rows.

    Expected columns (case-insensitive): unit_id, coder, variable, value.
    Observers and units keep their order of first appearance; if a coder
    rated a unit twice the first value wins.

    Args:
        df: Long-format DataFrame
        variable_levels: Dict mapping variable names to measurement levels
        value_orders: Dict mapping ordinal variables to declared value orders

    Returns:
        List of ObservationMatrix, in order of first appearance of each variable
    """
    variable_levels = variable_levels or {}
    value_orders = value_orders or {}

    df = df.copy()
    df.columns = df.columns.str.lower()
    required = {"unit_id", "coder", "variable", "value"}
    missing = required - set(df.columns)
    if missing:
        raise DataFormatError(f"Long format is missing columns: {sorted(missing)}")

    matrices = []
    for variable in pd.unique(df["variable"]):
        subset = df[df["variable"] == variable]
        subset = subset.drop_duplicates(subset=["unit_id", "coder"], keep="first")
        observers = [str(c) for c in pd.unique(subset["coder"])]
        wide = subset.pivot(index="unit_id", columns="coder", values="value")
        wide = wide.reindex(index=pd.unique(subset["unit_id"]), columns=pd.unique(subset["coder"]))

        rows = [
            (str(unit), [_cell(v) for v in wide.loc[unit].tolist()])
            for unit in wide.index
        ]
        matrices.append(ObservationMatrix.from_rows(
            str(variable),
            observers,
            rows,
            level=variable_levels.get(variable, NOMINAL),
            value_order=value_orders.get(variable),
        ))
    return matrices


def from_wide_dataframe(
    df: pd.DataFrame,
    variable: str,
    unit_column: Optional[str] = None,
    level: str = NOMINAL,
    value_order: Optional[Sequence[str]] = None,
) -> ObservationMatrix:
    """Build a matrix from a table with one row per unit and one column per observer.

    Args:
        df: Wide DataFrame
        variable: Variable name
        unit_column: Column with unit identifiers; the first column when None
        level: Measurement level
        value_order: Declared value order for ordinal data

    Returns:
        ObservationMatrix instance
    """
    unit_column = unit_column if unit_column is not None else df.columns[0]
    observers = [str(c) for c in df.columns if c != unit_column]
    rows = [
        (str(row[unit_column]), [_cell(row[o]) for o in df.columns if o != unit_column])
        for _, row in df.iterrows()
    ]
    return ObservationMatrix.from_rows(variable, observers, rows, level=level, value_order=value_order)
