"""
Rectangular table construction and inspection (tibble analogues over Polars).

Responsibilities
- Build Polars DataFrames column-wise (tibble) or row-wise (tribble).
- Enforce the rectangular-table invariants before handing data to Polars:
  unique column names, compatible column lengths (length-1 values recycle).
- Check an existing frame against those invariants (check_rectangular).
- Provide compact overviews (glimpse, column_summary) using tibble's dtype abbreviations.

Notes
- Polars already guarantees one dtype per column and equal column lengths for a
  constructed frame; the checks here only give friendlier errors on the way in.
- Expressions passed to tibble() are evaluated after the plain columns, in argument
  order, so later columns may refer to earlier ones.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import polars as pl

from .constants import GLIMPSE_WIDTH
from .errors import TableError

__all__ = [
    "tibble",
    "tribble",
    "as_tibble",
    "check_rectangular",
    "type_abbr",
    "glimpse",
    "column_summary",
]


def _is_vector(value: Any) -> bool:
    return hasattr(value, "__len__") and not isinstance(value, (str, bytes, Mapping))


def _length(value: Any) -> int:
    return len(value) if _is_vector(value) else 1


def _common_length(columns: Iterable[tuple[str, Any]]) -> int:
    """
    Validate (name, values) pairs and return their common row count.

    Values may be vectors (anything sized except strings and mappings) or
    scalars; length-1 values recycle.

    Raises:
        TableError: On duplicate names or incompatible lengths.
    """
    seen: set[str] = set()
    lengths: dict[str, int] = {}
    for name, values in columns:
        if name in seen:
            raise TableError(f"column names must be unique; {name!r} is duplicated")
        seen.add(name)
        lengths[name] = _length(values)

    sizes = {n for n in lengths.values() if n != 1}
    if len(sizes) > 1:
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        raise TableError(
            f"columns must have compatible lengths; only values of length one are recycled ({detail})"
        )
    if sizes:
        return sizes.pop()
    return 1 if lengths else 0


def check_rectangular(df: pl.DataFrame) -> pl.DataFrame:
    """
    Validate a table against the rectangular-table invariants.

    Args:
        df: Table to check.

    Returns:
        pl.DataFrame: ``df`` itself, so the check can sit inside a pipe.

    Raises:
        TableError: When ``df`` is not a DataFrame, has duplicate column names
            or columns of different lengths.

    Examples:
        >>> check_rectangular(tibble(x=[1, 2], y="a")).shape
        (2, 2)
    """
    if not isinstance(df, pl.DataFrame):
        raise TableError(f"expected a polars DataFrame, got {type(df).__name__}")
    names = [s.name for s in df.get_columns()]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise TableError(f"column names must be unique; duplicated: {dupes}")
    lengths = {s.name: s.len() for s in df.get_columns()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        raise TableError(f"columns must all have the same length ({detail})")
    return df


def _recycle(values: Any, n: int) -> Any:
    if isinstance(values, pl.Series):
        return values if values.len() == n else pl.Series(values.name, values.to_list() * n)
    if _is_vector(values):
        values = list(values)
        return values if len(values) == n else values * n
    return [values] * n


def tibble(**columns: Any) -> pl.DataFrame:
    """
    Build a table column by column.

    Args:
        **columns: name=values pairs. Values are vectors, scalars (recycled), or
            Polars expressions evaluated against the columns before them.

    Returns:
        pl.DataFrame: Columns in argument order.

    Raises:
        TableError: When vector lengths are incompatible.

    Examples:
        >>> df = tibble(x=[1, 2, 3], y=1, z=pl.col("x") * 2)
        >>> df.columns
        ['x', 'y', 'z']
        >>> df["z"].to_list()
        [2, 4, 6]
    """
    plain = [(k, v) for k, v in columns.items() if not isinstance(v, pl.Expr)]
    n = _common_length(plain)
    if not plain and columns:
        raise TableError("tibble() needs at least one column of values before expressions")

    df = pl.DataFrame({k: _recycle(v, n) for k, v in plain})
    for name, value in columns.items():
        if isinstance(value, pl.Expr):
            df = df.with_columns(value.alias(name))
    return df.select(list(columns)) if columns else df


def tribble(*cells: Any) -> pl.DataFrame:
    """
    Build a small table row by row.

    Leading strings of the form ``"~name"`` form the header; the remaining values
    fill the rows left to right.

    Raises:
        TableError: If no header is given or the value count is not a multiple of
            the column count.

    Examples:
        >>> df = tribble("~x", "~y", 1, "a", 2, "b")
        >>> df.shape
        (2, 2)
    """
    names: list[str] = []
    for cell in cells:
        if isinstance(cell, str) and cell.startswith("~"):
            names.append(cell[1:])
        else:
            break
    if not names:
        raise TableError('tribble() needs a header of "~name" values')

    values = list(cells[len(names) :])
    k = len(names)
    if len(values) % k != 0:
        raise TableError(
            f"tribble() got {len(values)} values for {k} columns; values must fill whole rows"
        )
    pairs = [(name, values[i::k]) for i, name in enumerate(names)]
    _common_length(pairs)
    return pl.DataFrame(dict(pairs))


def as_tibble(obj: pl.DataFrame | Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> pl.DataFrame:
    """Coerce a DataFrame, a mapping of columns, or a list of row dicts to a DataFrame."""
    if isinstance(obj, pl.DataFrame):
        return obj
    if isinstance(obj, Mapping):
        return tibble(**dict(obj))
    rows = list(obj)
    if not rows:
        return pl.DataFrame()
    return pl.DataFrame(rows)


def type_abbr(dtype: pl.DataType) -> str:
    """Return tibble's short type label for a Polars dtype (e.g. ``int``, ``dbl``, ``chr``)."""
    if dtype.is_integer():
        return "int"
    if dtype.is_float() or isinstance(dtype, pl.Decimal):
        return "dbl"
    if dtype == pl.String:
        return "chr"
    if dtype == pl.Boolean:
        return "lgl"
    if dtype == pl.Date:
        return "date"
    if isinstance(dtype, pl.Datetime):
        return "dttm"
    if isinstance(dtype, (pl.Categorical, pl.Enum)):
        return "fct"
    if isinstance(dtype, (pl.List, pl.Array)):
        return "list"
    if isinstance(dtype, pl.Struct):
        return "df"
    return str(dtype).lower()


def _format_cell(value: Any) -> str:
    if value is None:
        return "NA"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def glimpse(df: pl.DataFrame, *, width: int = GLIMPSE_WIDTH) -> str:
    """
    Return a transposed overview: one line per column with its type and leading values.

    Lines longer than ``width`` are cut and end with an ellipsis.

    Examples:
        >>> print(glimpse(tibble(x=[1, 2], y=["a", "b"])))
        Rows: 2
        Columns: 2
        $ x <int> 1, 2
        $ y <chr> "a", "b"
    """
    lines = [f"Rows: {df.height}", f"Columns: {df.width}"]
    pad = max((len(c) for c in df.columns), default=0)
    for name in df.columns:
        s = df.get_column(name)
        head = ", ".join(_format_cell(v) for v in s.head(width).to_list())
        line = f"$ {name.ljust(pad)} <{type_abbr(s.dtype)}> {head}"
        if len(line) > width:
            line = line[: width - 1] + "…"
        lines.append(line)
    return "\n".join(lines)


def column_summary(df: pl.DataFrame) -> pl.DataFrame:
    """One row per column: name, tibble type label, missing count and distinct count."""
    return pl.DataFrame(
        {
            "column": df.columns,
            "type": [type_abbr(dt) for dt in df.dtypes],
            "n_missing": [df.get_column(c).null_count() for c in df.columns],
            "n_unique": [df.get_column(c).n_unique() for c in df.columns],
        },
        schema={"column": pl.String, "type": pl.String, "n_missing": pl.Int64, "n_unique": pl.Int64},
    )
