"""Small multiples: facet_wrap and facet_grid."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

import altair as alt
import polars as pl

from .base import FieldRef, as_field, infer_field_type

if TYPE_CHECKING:  # pragma: no cover
    from .plot import Plot

__all__ = ["Facet", "FacetWrap", "FacetGrid", "facet_wrap", "facet_grid"]


def _facet_channel(cls: Any, ref: FieldRef, df: pl.DataFrame) -> Any:
    # Facets are always discrete; numeric keys such as cyl become ordinal panels.
    kind = ref.kind or infer_field_type(df.schema[ref.name])
    if kind == "quantitative":
        kind = "ordinal"
    return cls(field=ref.name, type=kind)


class Facet:
    """Base class for facet specifications."""

    def add_to(self, plot: Plot) -> Plot:
        return replace(plot, facet=self)

    def fields(self) -> list[tuple[str, str]]:
        raise NotImplementedError

    def apply(self, chart: Any, df: pl.DataFrame) -> alt.FacetChart:
        raise NotImplementedError


@dataclass(frozen=True)
class FacetWrap(Facet):
    facet: str | FieldRef
    ncol: int | None = None

    def fields(self) -> list[tuple[str, str]]:
        return [("facet", as_field(self.facet).name)]

    def apply(self, chart: Any, df: pl.DataFrame) -> alt.FacetChart:
        channel = _facet_channel(alt.Facet, as_field(self.facet), df)
        if self.ncol is not None:
            return chart.facet(facet=channel, columns=self.ncol)
        return chart.facet(facet=channel)


@dataclass(frozen=True)
class FacetGrid(Facet):
    rows: str | FieldRef | None = None
    cols: str | FieldRef | None = None

    def fields(self) -> list[tuple[str, str]]:
        out = []
        if self.rows is not None:
            out.append(("rows", as_field(self.rows).name))
        if self.cols is not None:
            out.append(("cols", as_field(self.cols).name))
        return out

    def apply(self, chart: Any, df: pl.DataFrame) -> alt.FacetChart:
        kwargs: dict[str, Any] = {}
        if self.rows is not None:
            kwargs["row"] = _facet_channel(alt.Row, as_field(self.rows), df)
        if self.cols is not None:
            kwargs["column"] = _facet_channel(alt.Column, as_field(self.cols), df)
        return chart.facet(**kwargs)


def facet_wrap(facet: str | FieldRef, *, ncol: int | None = None) -> FacetWrap:
    """One panel per value of ``facet``, wrapped into ``ncol`` columns."""
    return FacetWrap(facet, ncol)


def facet_grid(
    rows: str | FieldRef | None = None, cols: str | FieldRef | None = None
) -> FacetGrid:
    """Panels laid out on a rows x cols grid."""
    if rows is None and cols is None:
        raise ValueError("facet_grid() needs rows=, cols= or both")
    return FacetGrid(rows, cols)
