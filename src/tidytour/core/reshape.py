"""
tidyr-style reshaping over Polars DataFrames.

Responsibilities
- pivot_longer / pivot_wider: move variables between column names and cell values.
- separate / unite: split one text column into several, or paste several into one.
- Missing-value helpers: drop_na, fill, replace_na, complete.

Row order
- pivot_longer emits rows id-major (each input row yields its pivoted columns in
  column order), matching tidyr rather than Polars' column-major unpivot.
- pivot_wider keeps first-appearance order for both id rows and new columns.

Failures
- Duplicate id/key combinations in pivot_wider raise ReshapeError (tidyr would
  build list-columns with a warning; a rectangular result is not possible).
- Everything else (unknown columns, bad casts) surfaces as Polars' own errors.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import reduce
from typing import Any, Literal

import polars as pl
import polars.selectors as cs

from .errors import ReshapeError

__all__ = [
    "pivot_longer",
    "pivot_wider",
    "separate",
    "unite",
    "drop_na",
    "fill",
    "replace_na",
    "complete",
]

_ROW = "__tidytour_row"
_COL = "__tidytour_col"


def _resolve_columns(df: pl.DataFrame, columns: Any) -> list[str]:
    if cs.is_selector(columns):
        return list(cs.expand_selector(df, columns))
    if isinstance(columns, str):
        return [columns]
    return [str(c) for c in columns]


def _common_value_columns(df: pl.DataFrame, columns: list[str]) -> pl.DataFrame:
    dtypes = {df.schema[c] for c in columns}
    if len(dtypes) <= 1:
        return df
    if all(dt.is_numeric() for dt in dtypes):
        return df.with_columns(pl.col(columns).cast(pl.Float64))
    return df.with_columns(pl.col(columns).cast(pl.String))


def pivot_longer(
    df: pl.DataFrame,
    cols: Sequence[str] | str | Any,
    *,
    names_to: str = "name",
    values_to: str = "value",
    names_prefix: str | None = None,
    names_transform: pl.DataType | type[pl.DataType] | None = None,
    values_drop_na: bool = False,
) -> pl.DataFrame:
    """
    Gather ``cols`` into a key column (``names_to``) and a value column (``values_to``).

    Args:
        df: Wide table.
        cols: Column names or a Polars selector to pivot; all other columns are ids.
        names_to: Name of the new key column.
        values_to: Name of the new value column.
        names_prefix: Prefix stripped from the key values (e.g. ``"wk"``).
        names_transform: Optional dtype to cast the key column to (e.g. ``pl.Int64`` for years).
        values_drop_na: Drop rows whose value is null.

    Returns:
        pl.DataFrame: Long table with columns ids..., names_to, values_to.

    Notes:
        Value columns of different dtypes are cast to Float64 when all are numeric,
        otherwise to String.

    Examples:
        >>> wide = tibble(country=["A", "B"], **{"1999": [1, 2], "2000": [3, 4]})  # doctest: +SKIP
        >>> pivot_longer(wide, ["1999", "2000"], names_to="year", values_to="cases")  # doctest: +SKIP
    """
    on = _resolve_columns(df, cols)
    if not on:
        raise ReshapeError("pivot_longer() selected no columns")
    ids = [c for c in df.columns if c not in on]
    position = {name: i for i, name in enumerate(on)}

    out = (
        _common_value_columns(df, on)
        .with_row_index(_ROW)
        .unpivot(on=on, index=[_ROW, *ids], variable_name=names_to, value_name=values_to)
        .with_columns(
            pl.col(names_to)
            .replace_strict(list(position.keys()), list(position.values()), return_dtype=pl.Int64)
            .alias(_COL)
        )
        .sort([_ROW, _COL], maintain_order=True)
        .drop([_ROW, _COL])
    )
    if names_prefix:
        out = out.with_columns(pl.col(names_to).str.strip_prefix(names_prefix))
    if names_transform is not None:
        out = out.with_columns(pl.col(names_to).cast(names_transform))
    if values_drop_na:
        out = out.drop_nulls(subset=[values_to])
    return out


def pivot_wider(
    df: pl.DataFrame,
    *,
    names_from: str,
    values_from: str | Sequence[str],
    id_cols: Sequence[str] | None = None,
    values_fill: Any = None,
    names_prefix: str = "",
) -> pl.DataFrame:
    """
    Spread a key column (``names_from``) into one new column per distinct key.

    Args:
        df: Long table.
        names_from: Column whose values become the new column names.
        values_from: Column (or columns) providing the cell values.
        id_cols: Columns identifying a row; defaults to every other column.
        values_fill: Value used for missing cells (default null).
        names_prefix: Prefix added to each new column name.

    Raises:
        ReshapeError: When an id/key combination occurs more than once.
    """
    values = [values_from] if isinstance(values_from, str) else list(values_from)
    if id_cols is None:
        ids = [c for c in df.columns if c != names_from and c not in values]
    else:
        ids = list(id_cols)

    dupes = df.group_by([*ids, names_from]).len().filter(pl.col("len") > 1)
    if dupes.height:
        raise ReshapeError(
            f"pivot_wider(): {dupes.height} id/key combination(s) are not unique; "
            f"first: {dupes.drop('len').row(0, named=True)}"
        )

    out = df.pivot(
        on=names_from,
        index=ids or None,
        values=values,
        aggregate_function=None,
        maintain_order=True,
    )
    new_cols = [c for c in out.columns if c not in ids]
    if values_fill is not None:
        out = out.with_columns(pl.col(new_cols).fill_null(values_fill))
    if names_prefix:
        out = out.rename({c: f"{names_prefix}{c}" for c in new_cols})
    return out


def _convert(s: pl.Series) -> pl.Series:
    for dtype in (pl.Int64, pl.Float64):
        try:
            return s.cast(dtype, strict=True)
        except (pl.exceptions.InvalidOperationError, pl.exceptions.ComputeError):
            continue
    return s


def separate(
    df: pl.DataFrame,
    col: str,
    into: Sequence[str],
    *,
    sep: str | None = None,
    remove: bool = True,
    convert: bool = False,
) -> pl.DataFrame:
    """
    Split a text column into ``into`` columns.

    ``sep=None`` splits on any run of non-alphanumeric characters (tidyr's default);
    otherwise ``sep`` is a literal separator. Missing pieces become null and extra
    pieces are dropped. With ``convert=True`` each piece is cast to Int64 or
    Float64 when every value parses.

    Examples:
        >>> separate(table3, "rate", ["cases", "population"], sep="/", convert=True)  # doctest: +SKIP
    """
    into = list(into)
    if not into:
        raise ReshapeError("separate() needs at least one output column in into=")
    source = pl.col(col).cast(pl.String)
    if sep is None:
        source = source.str.replace_all(r"[^0-9A-Za-z]+", "\x00")
        sep = "\x00"
    pieces = (
        df.select(source.str.split_exact(sep, len(into) - 1).alias("_pieces"))
        .unnest("_pieces")
    )
    pieces = pieces.rename(dict(zip(pieces.columns, into, strict=True)))
    if convert:
        pieces = pl.DataFrame([_convert(pieces.get_column(c)) for c in into])

    position = df.columns.index(col)
    base = df.drop(col) if remove else df
    base = base.drop([c for c in into if c in base.columns])
    left = [c for c in df.columns[:position] if c in base.columns]
    right = [c for c in df.columns[position + 1 :] if c in base.columns]
    kept = [] if remove else [col]
    combined = pl.concat([base, pieces], how="horizontal")
    return combined.select([*left, *kept, *into, *right])


def unite(
    df: pl.DataFrame,
    col: str,
    *columns: str,
    sep: str = "_",
    remove: bool = True,
) -> pl.DataFrame:
    """Paste ``columns`` into a new text column ``col`` placed where the first of them was. Nulls print as NA."""
    if not columns:
        raise ReshapeError("unite() needs at least one column to paste")
    pasted = pl.concat_str(
        [pl.col(c).cast(pl.String).fill_null("NA") for c in columns], separator=sep
    ).alias(col)
    position = df.columns.index(columns[0])
    out = df.with_columns(pasted)
    rest = [c for c in df.columns if not (remove and c in columns) and c != col]
    left = [c for c in rest if df.columns.index(c) < position]
    right = [c for c in rest if df.columns.index(c) >= position]
    return out.select([*left, col, *right])


def drop_na(df: pl.DataFrame, *columns: str) -> pl.DataFrame:
    """Drop rows with a null in any of ``columns`` (any column when none are given)."""
    return df.drop_nulls(subset=list(columns) or None)


def fill(
    df: pl.DataFrame,
    *columns: str,
    direction: Literal["down", "up", "downup", "updown"] = "down",
) -> pl.DataFrame:
    """Fill nulls with the previous (``down``) or next (``up``) non-null value."""
    exprs = []
    for c in columns:
        e = pl.col(c)
        if direction == "down":
            e = e.forward_fill()
        elif direction == "up":
            e = e.backward_fill()
        elif direction == "downup":
            e = e.forward_fill().backward_fill()
        elif direction == "updown":
            e = e.backward_fill().forward_fill()
        else:
            raise ValueError(f"unknown fill direction {direction!r}")
        exprs.append(e)
    return df.with_columns(exprs) if exprs else df


def replace_na(df: pl.DataFrame, replace: Mapping[str, Any]) -> pl.DataFrame:
    """Replace nulls per column, e.g. ``replace_na(df, {"cases": 0})``."""
    return df.with_columns([pl.col(c).fill_null(v) for c, v in replace.items()])


def complete(
    df: pl.DataFrame,
    *columns: str,
    fill: Mapping[str, Any] | None = None,
) -> pl.DataFrame:
    """
    Add rows for combinations of ``columns`` that do not appear in the data.

    The output is sorted by ``columns``; rows whose key contains a null are kept
    unchanged at the end. ``fill`` replaces nulls in the other columns.
    """
    if not columns:
        return df
    keys = list(columns)
    levels = [df.select(pl.col(c).drop_nulls().unique().sort()) for c in keys]
    grid = reduce(lambda a, b: a.join(b, how="cross"), levels)
    out = grid.join(df, on=keys, how="left", maintain_order="left").select(df.columns)
    null_keys = df.filter(pl.any_horizontal([pl.col(c).is_null() for c in keys]))
    if null_keys.height:
        out = pl.concat([out, null_keys], how="vertical_relaxed")
    if fill:
        out = replace_na(out, fill)
    return out
