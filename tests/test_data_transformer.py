"""Tests for the block text format and the DataFrame loaders."""

import io

import pandas as pd
import pytest

from irr.data_transformer import (
    from_long_dataframe,
    from_wide_dataframe,
    iter_matrices,
    load_matrices,
    load_table,
    parse_text,
)
from irr.errors import DataFormatError
from irr.models import INTERVAL, MISSING, NOMINAL, ORDINAL

TWO_BLOCKS = """\
topic,ann,bob,cid
d1,sports,sports,politics
d2,politics,politics,
d3,sports,,sports

quality,ann,bob
d1,Low,Mid
d2,High,High
,ordinal,Low,Mid,High
"""


def test_parse_two_blocks():
    topic, quality = parse_text(TWO_BLOCKS)

    assert topic.variable == "topic"
    assert topic.observers == ["ann", "bob", "cid"]
    assert topic.units == ["d1", "d2", "d3"]
    assert topic.values == ["sports", "politics"]
    assert topic.level == NOMINAL
    assert topic.get_value(1, 2) == MISSING
    assert topic.get_value(2, 1) == MISSING

    assert quality.variable == "quality"
    assert quality.level == ORDINAL
    assert quality.values == ["Low", "Mid", "High"]
    assert quality.get_value(0, 1) == 1


def test_leading_blank_and_comma_lines_are_skipped():
    text = "\n,,\n   \nv,a,b\nu1,x,y\n"
    (matrix,) = parse_text(text)
    assert matrix.variable == "v"
    assert matrix.n_units == 1


def test_comma_line_ends_block():
    text = "v,a,b\nu1,x,y\n,\nw,a,b\nu1,p,p\n"
    v, w = parse_text(text)
    assert v.level == NOMINAL
    assert w.variable == "w"


def test_interval_declaration():
    (matrix,) = parse_text("v,a,b\nu1,1,2\n,interval\n")
    assert matrix.level == INTERVAL


def test_short_rows_pad_with_missing():
    (matrix,) = parse_text("v,a,b,c\nu1,x\nu2,x,y,z\n")
    assert matrix.get_value(0, 1) == MISSING
    assert matrix.get_value(0, 2) == MISSING
    assert matrix.n_observations == 4


def test_trailing_empty_cells_allowed():
    (matrix,) = parse_text("v,a,b\nu1,x,y,,\n")
    assert matrix.n_observations == 2


@pytest.mark.parametrize("text, message", [
    ("v,a\nu1,x,y\n", "more observations"),
    ("v,a,b\nu1,x,y\n,ratio\n", "Unknown measurement level"),
    ("v,a,b\nu1,x,y\n,ordinal\n", "without values"),
    ("v,a,b\nu1,Low,Huge\n,ordinal,Low,High\n", "not among the declared"),
    ("v\nu1,x\n", "Header"),
])
def test_malformed_blocks(text, message):
    with pytest.raises(DataFormatError, match=message):
        parse_text(text)


def test_empty_input():
    assert parse_text("") == []
    assert parse_text("\n\n,,\n") == []


def test_iter_matrices_is_lazy():
    lines = iter(TWO_BLOCKS.splitlines(keepends=True))
    blocks = iter_matrices(lines)
    first = next(blocks)
    assert first.variable == "topic"
    # the second block has not been consumed yet
    assert next(lines).startswith("quality")


def test_load_matrices_from_path_and_stream(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(TWO_BLOCKS, encoding="utf-8")
    from_path = load_matrices(path)
    from_stream = load_matrices(io.StringIO(TWO_BLOCKS))
    assert [m.variable for m in from_path] == ["topic", "quality"]
    assert [m.variable for m in from_stream] == ["topic", "quality"]


def test_load_table_csv(tmp_path):
    path = tmp_path / "wide.csv"
    path.write_text("unit,A,B\n1,007,x\n2,,y\n", encoding="utf-8")
    df = load_table(str(path))
    # values stay strings
    assert df.loc[0, "A"] == "007"
    assert pd.isna(df.loc[1, "A"])


def test_load_table_rejects_unknown_extension(tmp_path):
    with pytest.raises(DataFormatError, match="Unsupported"):
        load_table(str(tmp_path / "data.json"))


def test_long_dataframe():
    df = pd.DataFrame({
        "Unit_ID": ["u1", "u1", "u2", "u2", "u1", "u2", "u1"],
        "Coder": ["ann", "bob", "ann", "bob", "ann", "ann", "ann"],
        "Variable": ["topic", "topic", "topic", "topic", "tone", "tone", "topic"],
        "Value": ["a", "a", "b", None, "pos", "neg", "z"],
    })
    topic, tone = from_long_dataframe(df, variable_levels={"tone": ORDINAL},
                                      value_orders={"tone": ["neg", "pos"]})

    assert topic.variable == "topic"
    assert topic.observers == ["ann", "bob"]
    assert topic.units == ["u1", "u2"]
    # the duplicate (u1, ann) row keeps its first value
    assert topic.get_value(0, 0) == topic.values.index("a")
    assert topic.get_value(1, 1) == MISSING
    assert "z" not in topic.values

    assert tone.level == ORDINAL
    assert tone.values == ["neg", "pos"]
    assert tone.observers == ["ann"]


def test_long_dataframe_missing_columns():
    df = pd.DataFrame({"unit_id": ["u1"], "coder": ["a"], "value": ["x"]})
    with pytest.raises(DataFormatError, match="variable"):
        from_long_dataframe(df)


def test_wide_dataframe():
    df = pd.DataFrame({
        "doc": ["d1", "d2", "d3"],
        "A": ["1", "2", None],
        "B": ["1", "3", "2"],
    })
    matrix = from_wide_dataframe(df, "score", level=ORDINAL, value_order=["1", "2", "3"])
    assert matrix.variable == "score"
    assert matrix.observers == ["A", "B"]
    assert matrix.units == ["d1", "d2", "d3"]
    assert matrix.get_value(2, 0) == MISSING
    assert matrix.get_value(1, 1) == 2


def test_wide_dataframe_named_unit_column():
    df = pd.DataFrame({"A": ["x", "y"], "unit": ["u1", "u2"], "B": ["x", "x"]})
    matrix = from_wide_dataframe(df, "v", unit_column="unit")
    assert matrix.units == ["u1", "u2"]
    assert matrix.observers == ["A", "B"]
