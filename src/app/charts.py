from __future__ import annotations

from typing import Any, Literal

import polars as pl

from app.data import even_sample
from tidytour.viz import (
    Plot,
    aes,
    factor,
    geom_bar,
    geom_boxplot,
    geom_histogram,
    geom_line,
    geom_point,
    ggplot,
    infer_field_type,
    labs,
)

__all__ = ["PlotKind", "PLOT_KINDS", "suggest_kind", "quick_plot", "explorer_chart"]

PlotKind = Literal["auto", "point", "line", "bar", "histogram", "boxplot"]
PLOT_KINDS: tuple[str, ...] = ("auto", "point", "line", "bar", "histogram", "boxplot")


def _is_numeric(df: pl.DataFrame, column: str) -> bool:
    return infer_field_type(df.schema[column]) == "quantitative"


def suggest_kind(df: pl.DataFrame, x: str, y: str | None = None) -> str:
    """Pick a sensible geom for the selected columns.

    Args:
        df (pl.DataFrame): Explorer table.
        x (str): X column.
        y (str | None): Optional Y column.

    Returns:
        str: "histogram" or "bar" for a single column (numeric vs categorical);
        "boxplot" for categorical x with numeric y; otherwise "point".
    """
    if y is None:
        return "histogram" if _is_numeric(df, x) else "bar"
    if not _is_numeric(df, x) and _is_numeric(df, y):
        return "boxplot"
    return "point"


def quick_plot(
    df: pl.DataFrame,
    x: str,
    y: str | None = None,
    *,
    color: str | None = None,
    kind: PlotKind = "auto",
) -> Plot:
    """Build an explorer Plot for one or two columns.

    Numeric color columns with few distinct values (cyl, gear, ...) are
    treated as categories.

    Raises:
        ValueError: If ``kind`` needs a y column and none is given, or is unknown.
    """
    chosen = suggest_kind(df, x, y) if kind == "auto" else kind
    if chosen in ("point", "line", "boxplot") and y is None:
        raise ValueError(f"{chosen} plots need a y column")

    color_ref: Any = None
    if color is not None:
        color_ref = factor(color) if df.get_column(color).n_unique() <= 10 else color

    if chosen == "histogram":
        return ggplot(df, aes(x, fill=color_ref)) + geom_histogram(bins=20)
    if chosen == "bar":
        x_ref = factor(x) if _is_numeric(df, x) else x
        return ggplot(df, aes(x_ref, fill=color_ref)) + geom_bar()
    if chosen == "boxplot":
        return ggplot(df, aes(factor(x), y, color=color_ref)) + geom_boxplot()
    if chosen == "line":
        return ggplot(df.sort(x), aes(x, y, color=color_ref)) + geom_line()
    if chosen == "point":
        return ggplot(df, aes(x, y, color=color_ref)) + geom_point() + labs(x=x, y=y)
    raise ValueError(f"unknown plot kind {kind!r}; expected one of {PLOT_KINDS}")


def explorer_chart(
    df: pl.DataFrame,
    x: str,
    y: str | None = None,
    *,
    color: str | None = None,
    kind: PlotKind = "auto",
    max_points: int = 5000,
    width: int = 400,
    height: int = 300,
    theme: str = "minimal",
) -> Any:
    """Quick plot compiled to Altair, downsampled to at most ``max_points`` rows."""
    sampled = even_sample(df, max_points)
    return quick_plot(sampled, x, y, color=color, kind=kind).to_altair(width=width, height=height, theme=theme)
