"""
Shared helpers for the grammar-of-graphics layer.

- FieldRef / factor / ordered: column references with an optional forced encoding type.
- infer_field_type: Vega-Lite measurement type from a Polars dtype.
- to_values: Polars rows as JSON-ready dicts for ``alt.Data(values=...)``.
- validate_columns: fail early when a mapping names a column the data lacks.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

import polars as pl

from tidytour.core.errors import PlotSpecError

__all__ = [
    "EncodingType",
    "FieldRef",
    "factor",
    "ordered",
    "as_field",
    "infer_field_type",
    "to_values",
    "validate_columns",
]

EncodingType = Literal["quantitative", "nominal", "ordinal", "temporal"]


@dataclass(frozen=True)
class FieldRef:
    """A mapped column, optionally with a forced Vega-Lite type."""

    name: str
    kind: EncodingType | None = None


def factor(name: str) -> FieldRef:
    """Treat a column as unordered categories (``factor(cyl)`` in R)."""
    return FieldRef(name, "nominal")


def ordered(name: str) -> FieldRef:
    """Treat a column as ordered categories."""
    return FieldRef(name, "ordinal")


def as_field(ref: str | FieldRef) -> FieldRef:
    return ref if isinstance(ref, FieldRef) else FieldRef(str(ref))


def infer_field_type(dtype: pl.DataType) -> EncodingType:
    """
    Map a Polars dtype to a Vega-Lite type.

    Numeric -> quantitative, date/datetime/time -> temporal, everything else
    (strings, booleans, categoricals) -> nominal.
    """
    if dtype == pl.Boolean:
        return "nominal"
    if dtype.is_numeric():
        return "quantitative"
    if dtype.is_temporal():
        return "temporal"
    return "nominal"


def to_values(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Rows as dicts with temporal columns rendered as ISO strings (JSON-safe)."""
    casts = [pl.col(c).cast(pl.String) for c, dt in df.schema.items() if dt.is_temporal()]
    if casts:
        df = df.with_columns(casts)
    return df.to_dicts()


def validate_columns(df: pl.DataFrame, refs: Iterable[tuple[str, str]]) -> None:
    """
    Raise PlotSpecError when any (role, column) pair names a column missing from ``df``.

    Args:
        df: Plot data.
        refs: Pairs like ("x", "wt") or ("facet", "cyl").
    """
    missing = [(role, col) for role, col in refs if col not in df.columns]
    if missing:
        detail = ", ".join(f"{role}={col!r}" for role, col in missing)
        raise PlotSpecError(f"unknown column(s) in mapping: {detail}; available: {df.columns}")
