"""
dplyr-style verbs over Polars DataFrames.

Every verb takes the table first and returns a new table; nothing mutates its
input. Column references are names (str), Polars expressions, or Polars
selectors. Failures such as unknown columns or dtype mismatches propagate as
Polars' own exceptions.

Grouping
- group_by() returns a GroupedFrame (frame + key names). summarize() gives one
  row per group sorted by key; mutate() and filter_rows() evaluate per group via
  window expressions and keep the grouping.

Pipe chaining
- pipe(df, step, step, ...) applies callables left to right; verb(fn, ...)
  builds such a step, so a chain reads like ``df |> filter() |> summarize()``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import polars as pl

__all__ = [
    "GroupedFrame",
    "Desc",
    "desc",
    "n",
    "n_distinct",
    "select",
    "filter_rows",
    "mutate",
    "rename",
    "arrange",
    "distinct",
    "slice_head",
    "slice_tail",
    "slice_max",
    "slice_min",
    "group_by",
    "ungroup",
    "summarize",
    "count",
    "left_join",
    "inner_join",
    "full_join",
    "semi_join",
    "anti_join",
    "pipe",
    "verb",
]

Frame = pl.DataFrame
ColumnRef = str | pl.Expr


@dataclass(frozen=True)
class GroupedFrame:
    """
    A table with grouping keys attached (the result of group_by()).

    Attributes:
        frame (pl.DataFrame): Underlying rows, order unchanged.
        keys (tuple[str, ...]): Grouping column names.
    """

    frame: pl.DataFrame
    keys: tuple[str, ...]

    @property
    def n_groups(self) -> int:
        return self.frame.select(self.keys).unique().height

    def pipe(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return fn(self, *args, **kwargs)

    def __repr__(self) -> str:
        return f"# Groups: {', '.join(self.keys)} [{self.n_groups}]\n{self.frame!r}"


@dataclass(frozen=True)
class Desc:
    """Descending sort key marker for arrange()."""

    column: ColumnRef


def desc(column: ColumnRef) -> Desc:
    return Desc(column)


def n() -> pl.Expr:
    """Row count within the current group (``n()`` in dplyr)."""
    return pl.len().cast(pl.Int64)


def n_distinct(column: str) -> pl.Expr:
    return pl.col(column).n_unique().cast(pl.Int64)


def _split(data: Frame | GroupedFrame) -> tuple[Frame, tuple[str, ...]]:
    if isinstance(data, GroupedFrame):
        return data.frame, data.keys
    return data, ()


def _regroup(frame: Frame, keys: tuple[str, ...]) -> Frame | GroupedFrame:
    return GroupedFrame(frame, keys) if keys else frame


def _as_expr(value: Any) -> pl.Expr:
    if isinstance(value, pl.Expr):
        return value
    return pl.lit(value)


# ----------------------------
# Columns
# ----------------------------


def select(df: Frame, *columns: ColumnRef | Any) -> Frame:
    """
    Keep columns by name, expression or selector; names prefixed with ``-`` are dropped.

    Examples:
        >>> select(tbl, "country", "year")          # doctest: +SKIP
        >>> select(tbl, "-population")              # doctest: +SKIP
        >>> select(tbl, cs.numeric())               # doctest: +SKIP
    """
    drops = [c[1:] for c in columns if isinstance(c, str) and c.startswith("-")]
    keeps = [c for c in columns if not (isinstance(c, str) and c.startswith("-"))]
    out = df.select(keeps) if keeps else df
    if drops:
        out = out.drop(drops)
    return out


def rename(df: Frame, **new_from_old: str) -> Frame:
    """Rename columns with ``new="old"`` pairs (dplyr's argument order)."""
    return df.rename({old: new for new, old in new_from_old.items()})


def mutate(data: Frame | GroupedFrame, **columns: Any) -> Frame | GroupedFrame:
    """
    Add or replace columns. Expressions are applied one at a time so a later
    column can use an earlier one; on a GroupedFrame each expression is
    evaluated within groups.
    """
    frame, keys = _split(data)
    for name, value in columns.items():
        expr = _as_expr(value)
        if keys and isinstance(value, pl.Expr):
            expr = expr.over(list(keys))
        frame = frame.with_columns(expr.alias(name))
    return _regroup(frame, keys)


# ----------------------------
# Rows
# ----------------------------


def filter_rows(data: Frame | GroupedFrame, *predicates: pl.Expr) -> Frame | GroupedFrame:
    """Keep rows where every predicate is true. Rows where a predicate is null are dropped."""
    frame, keys = _split(data)
    if not predicates:
        return data
    combined = predicates[0]
    for p in predicates[1:]:
        combined = combined & p
    if keys:
        combined = combined.over(list(keys))
    return _regroup(frame.filter(combined.fill_null(False)), keys)


def arrange(df: Frame, *columns: ColumnRef | Desc) -> Frame:
    """Sort rows by one or more keys; wrap a key in desc() for descending order. Nulls sort last."""
    if not columns:
        return df
    by: list[ColumnRef] = []
    descending: list[bool] = []
    for c in columns:
        if isinstance(c, Desc):
            by.append(c.column)
            descending.append(True)
        else:
            by.append(c)
            descending.append(False)
    return df.sort(by, descending=descending, nulls_last=True, maintain_order=True)


def distinct(df: Frame, *columns: str) -> Frame:
    """Unique rows (or unique combinations of ``columns``), keeping first occurrences in order."""
    if columns:
        return df.select(columns).unique(keep="first", maintain_order=True)
    return df.unique(keep="first", maintain_order=True)


def slice_head(df: Frame, n: int = 1) -> Frame:
    return df.head(n)


def slice_tail(df: Frame, n: int = 1) -> Frame:
    return df.tail(n)


def _slice_extreme(df: Frame, column: str, n: int, *, largest: bool, with_ties: bool) -> Frame:
    ordered = df.filter(pl.col(column).is_not_null()).sort(
        column, descending=largest, maintain_order=True
    )
    top = ordered.head(n)
    if not with_ties or top.height == 0:
        return top
    cutoff = top.get_column(column)[-1]
    if largest:
        return ordered.filter(pl.col(column) >= cutoff)
    return ordered.filter(pl.col(column) <= cutoff)


def slice_max(df: Frame, column: str, n: int = 1, *, with_ties: bool = True) -> Frame:
    """Rows with the largest values of ``column``; ties at the cutoff are kept, as dplyr does."""
    return _slice_extreme(df, column, n, largest=True, with_ties=with_ties)


def slice_min(df: Frame, column: str, n: int = 1, *, with_ties: bool = True) -> Frame:
    """Rows with the smallest values of ``column``; ties at the cutoff are kept."""
    return _slice_extreme(df, column, n, largest=False, with_ties=with_ties)


# ----------------------------
# Grouping and aggregation
# ----------------------------


def group_by(df: Frame | GroupedFrame, *keys: str) -> GroupedFrame:
    """Attach grouping keys. Grouping a grouped frame replaces its keys."""
    frame, _ = _split(df)
    if not keys:
        raise ValueError("group_by() needs at least one column name")
    missing = [k for k in keys if k not in frame.columns]
    if missing:
        raise pl.exceptions.ColumnNotFoundError(", ".join(missing))
    return GroupedFrame(frame, tuple(keys))


def ungroup(data: Frame | GroupedFrame) -> Frame:
    frame, _ = _split(data)
    return frame


def summarize(data: Frame | GroupedFrame, **aggregations: pl.Expr) -> Frame:
    """
    Collapse to one row per group (or one row overall when ungrouped).

    Grouped output is sorted by the key columns, as dplyr's summarise() is.

    Examples:
        >>> summarize(group_by(cars, "cyl"), mpg=pl.col("mpg").mean(), n=n())  # doctest: +SKIP
    """
    frame, keys = _split(data)
    exprs = [_as_expr(v).alias(k) for k, v in aggregations.items()]
    if not keys:
        return frame.select(exprs)
    out = frame.group_by(list(keys), maintain_order=True).agg(exprs)
    return out.sort(list(keys), nulls_last=True, maintain_order=True)


def count(
    data: Frame | GroupedFrame,
    *columns: str,
    sort: bool = False,
    name: str = "n",
) -> Frame:
    """
    Count rows per combination of ``columns`` (plus any grouping keys).

    Output is sorted by key; with ``sort=True`` the largest counts come first.
    """
    frame, keys = _split(data)
    by = list(dict.fromkeys([*keys, *columns]))
    if not by:
        return frame.select(n().alias(name))
    out = (
        frame.group_by(by, maintain_order=True)
        .agg(n().alias(name))
        .sort(by, nulls_last=True, maintain_order=True)
    )
    if sort:
        out = out.sort(name, descending=True, maintain_order=True)
    return out


# ----------------------------
# Joins
# ----------------------------

JoinKeys = str | Sequence[str] | Mapping[str, str] | None


def _join(
    x: Frame,
    y: Frame,
    how: Literal["left", "inner", "full", "semi", "anti"],
    by: JoinKeys,
    suffix: str,
) -> Frame:
    if by is None:
        shared = [c for c in x.columns if c in y.columns]
        if not shared:
            raise ValueError("no common columns to join by; pass by=")
        by = shared
    extra: dict[str, Any] = {}
    if how in ("left", "inner"):
        extra["maintain_order"] = "left"
    elif how == "full":
        extra["coalesce"] = True
        extra["maintain_order"] = "left_right"
    if isinstance(by, Mapping):
        return x.join(
            y, left_on=list(by.keys()), right_on=list(by.values()), how=how, suffix=suffix, **extra
        )
    on = [by] if isinstance(by, str) else list(by)
    return x.join(y, on=on, how=how, suffix=suffix, **extra)


def left_join(x: Frame, y: Frame, by: JoinKeys = None, *, suffix: str = "_y") -> Frame:
    """Keep all rows of x; by=None joins on the shared column names (a natural join)."""
    return _join(x, y, "left", by, suffix)


def inner_join(x: Frame, y: Frame, by: JoinKeys = None, *, suffix: str = "_y") -> Frame:
    return _join(x, y, "inner", by, suffix)


def full_join(x: Frame, y: Frame, by: JoinKeys = None, *, suffix: str = "_y") -> Frame:
    return _join(x, y, "full", by, suffix)


def semi_join(x: Frame, y: Frame, by: JoinKeys = None) -> Frame:
    """Rows of x with a match in y (columns of x only)."""
    return _join(x, y, "semi", by, "_y")


def anti_join(x: Frame, y: Frame, by: JoinKeys = None) -> Frame:
    """Rows of x without a match in y."""
    return _join(x, y, "anti", by, "_y")


# ----------------------------
# Pipe chaining
# ----------------------------


def verb(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Callable[[Any], Any]:
    """Partially apply a verb so it can be used as a pipe() step."""

    def step(data: Any) -> Any:
        return fn(data, *args, **kwargs)

    step.__name__ = getattr(fn, "__name__", "step")
    return step


def pipe(data: Any, *steps: Callable[[Any], Any]) -> Any:
    """Apply ``steps`` left to right, feeding each result into the next."""
    for step in steps:
        data = step(data)
    return data
