from __future__ import annotations

from array import array

import polars as pl
import pytest

from tidytour.core import TableError, as_tibble, check_rectangular, column_summary, glimpse, tibble, tribble, type_abbr


def test_tibble_recycles_scalars_and_evaluates_expressions_in_order() -> None:
    # Act
    df = tibble(x=[1, 2, 3], y=1, z=pl.col("x") * 2 + pl.col("y"))

    # Assert
    assert df.columns == ["x", "y", "z"]
    assert df["y"].to_list() == [1, 1, 1]
    assert df["z"].to_list() == [3, 5, 7]


def test_tibble_rejects_incompatible_lengths() -> None:
    with pytest.raises(TableError) as ei:
        tibble(x=[1, 2, 3], y=[1, 2])
    assert "compatible lengths" in str(ei.value)


def test_tibble_needs_values_before_expressions() -> None:
    with pytest.raises(TableError):
        tibble(z=pl.lit(1))


def test_check_rectangular_returns_valid_frames_unchanged() -> None:
    # Arrange
    df = tibble(x=[1, 2], y=["a", "b"])

    # Act / Assert
    assert check_rectangular(df) is df
    assert check_rectangular(pl.DataFrame()).shape == (0, 0)


def test_check_rectangular_rejects_non_frames() -> None:
    with pytest.raises(TableError) as ei:
        check_rectangular([("a", [1, 2])])
    assert "DataFrame" in str(ei.value)


def test_tribble_rejects_duplicate_names() -> None:
    with pytest.raises(TableError) as ei:
        tribble("~a", "~a", 1, 2)
    assert "unique" in str(ei.value)


def test_tibble_treats_any_sized_value_as_a_vector() -> None:
    # Act
    df = tibble(x=array("q", [1, 2, 3]), y=1, z=pl.Series([4, 5, 6]))

    # Assert
    assert df.shape == (3, 3)
    assert df["x"].to_list() == [1, 2, 3]
    assert df["y"].to_list() == [1, 1, 1]


def test_tribble_builds_rows_from_header() -> None:
    df = tribble(
        "~x", "~y",
        1, "a",
        2, "b",
        3, "c",
    )
    assert df.columns == ["x", "y"]
    assert df.shape == (3, 2)
    assert df.row(1) == (2, "b")


def test_tribble_errors() -> None:
    with pytest.raises(TableError):
        tribble(1, 2, 3)
    with pytest.raises(TableError) as ei:
        tribble("~x", "~y", 1, "a", 2)
    assert "whole rows" in str(ei.value)


def test_as_tibble_accepts_mapping_rows_and_frames() -> None:
    df = pl.DataFrame({"a": [1]})
    assert as_tibble(df) is df
    assert as_tibble({"a": [1, 2], "b": "k"})["b"].to_list() == ["k", "k"]
    assert as_tibble([{"a": 1}, {"a": 2}]).height == 2


@pytest.mark.parametrize(
    ("dtype", "abbr"),
    [
        (pl.Int64, "int"),
        (pl.Float64, "dbl"),
        (pl.String, "chr"),
        (pl.Boolean, "lgl"),
        (pl.Date, "date"),
        (pl.Datetime("us"), "dttm"),
        (pl.List(pl.Int64), "list"),
    ],
)
def test_type_abbr(dtype, abbr) -> None:
    assert type_abbr(dtype) == abbr


def test_glimpse_lists_columns_with_types_and_values() -> None:
    df = tibble(x=[1, 2], y=["a", None], ok=[True, False])

    text = glimpse(df)

    lines = text.splitlines()
    assert lines[0] == "Rows: 2"
    assert lines[1] == "Columns: 3"
    assert lines[2] == "$ x  <int> 1, 2"
    assert lines[3] == '$ y  <chr> "a", NA'
    assert lines[4] == "$ ok <lgl> TRUE, FALSE"


def test_glimpse_truncates_long_lines() -> None:
    df = tibble(x=list(range(200)))
    line = glimpse(df, width=30).splitlines()[2]
    assert len(line) == 30
    assert line.endswith("…")


def test_column_summary_counts_missing_and_unique() -> None:
    df = tibble(a=[1, None, 1], b=["x", "y", "z"])

    out = column_summary(df)

    assert out.columns == ["column", "type", "n_missing", "n_unique"]
    assert out.row(0) == ("a", "int", 1, 2)
    assert out.row(1) == ("b", "chr", 0, 3)
