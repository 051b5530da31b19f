"""
Plot: data + mapping + layers + scales + facets + labels + theme.

A Plot is immutable; ``plot + component`` returns a new Plot. Components are
anything with an ``add_to(plot)`` method (geoms, scales, labels, facets,
themes, coord_flip), or a list of them.

Compilation (Plot.to_altair)
1. Validate: at least one layer; every mapped column exists in the data.
2. Build each layer with its merged mapping. A single layer carries the data
   itself; several layers share it at the top of an ``alt.layer``.
3. Size, facet, title, then apply the theme configuration.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import altair as alt
import polars as pl

from tidytour.core.errors import PlotSpecError

from .aes import Aes
from .base import to_values, validate_columns
from .facets import Facet
from .geoms import Geom, LayerContext
from .scales import Labels, Scale
from .theme import Theme, theme_by_name

__all__ = ["Plot", "ggplot"]


@dataclass(frozen=True, eq=False)
class Plot:
    """
    Immutable grammar-of-graphics plot specification.

    Attributes:
        data (pl.DataFrame): Plot data.
        mapping (Aes): Plot-level aesthetic mapping inherited by layers.
        layers (tuple[Geom, ...]): Geometric layers, drawn in order.
        scales (tuple[Scale, ...]): At most one scale per aesthetic.
        facet (Facet | None): Small-multiple layout.
        labels (Labels): Title and axis/legend titles.
        theme (Theme | None): Explicit theme; None uses the renderer default.
        flipped (bool): Swap x and y positions.

    Examples:
        >>> p = ggplot(cars, aes("wt", "mpg")) + geom_point() + labs(title="Weight vs mileage")  # doctest: +SKIP
        >>> p.to_dict()["mark"]  # doctest: +SKIP
        {'type': 'point', 'filled': True}
    """

    data: pl.DataFrame
    mapping: Aes = field(default_factory=Aes)
    layers: tuple[Geom, ...] = ()
    scales: tuple[Scale, ...] = ()
    facet: Facet | None = None
    labels: Labels = field(default_factory=Labels)
    theme: Theme | None = None
    flipped: bool = False

    def __add__(self, other: Any) -> Plot:
        if isinstance(other, (list, tuple)):
            out = self
            for component in other:
                out = out + component
            return out
        add_to = getattr(other, "add_to", None)
        if add_to is None:
            return NotImplemented
        return add_to(self)

    # ----------------------------
    # Validation
    # ----------------------------

    def _mapped_columns(self) -> Iterable[tuple[str, str]]:
        for layer in self.layers:
            for name, ref in layer.layer_mapping(self.mapping).items():
                yield name, ref.name
        if self.facet is not None:
            yield from self.facet.fields()

    def validate(self) -> None:
        """Raise PlotSpecError for an empty plot or mappings to unknown columns."""
        if not self.layers:
            raise PlotSpecError("plot has no layers; add one with + geom_*()")
        validate_columns(self.data, self._mapped_columns())

    # ----------------------------
    # Compilation
    # ----------------------------

    def to_altair(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        theme: str = "minimal",
    ) -> Any:
        """
        Compile to an Altair chart.

        Args:
            width: Panel width in pixels (Vega-Lite default when None).
            height: Panel height in pixels.
            theme: Theme name used when the plot has no explicit theme.

        Returns:
            alt.Chart | alt.LayerChart | alt.FacetChart
        """
        self.validate()
        source = alt.Data(values=to_values(self.data))
        single = len(self.layers) == 1
        scales = {s.aesthetic: s for s in self.scales}

        charts = []
        for layer in self.layers:
            ctx = LayerContext(
                data=self.data,
                mapping=layer.layer_mapping(self.mapping),
                scales=scales,
                labels=self.labels,
                source=source if single else alt.Undefined,
                flipped=self.flipped,
            )
            charts.append(layer.build(ctx))

        chart: Any = charts[0] if single else alt.layer(*charts, data=source)
        size: dict[str, int] = {}
        if width is not None:
            size["width"] = width
        if height is not None:
            size["height"] = height
        if size:
            chart = chart.properties(**size)
        if self.facet is not None:
            chart = self.facet.apply(chart, self.data)
        if self.labels.title is not None:
            title = (
                alt.TitleParams(text=self.labels.title, subtitle=self.labels.subtitle)
                if self.labels.subtitle
                else self.labels.title
            )
            chart = chart.properties(title=title)
        return (self.theme or theme_by_name(theme)).apply(chart)

    def to_dict(self, **kwargs: Any) -> dict[str, Any]:
        """Vega-Lite specification of the compiled chart."""
        return self.to_altair(**kwargs).to_dict()

    def _repr_mimebundle_(self, include: Any = None, exclude: Any = None) -> Any:
        return self.to_altair()._repr_mimebundle_(include=include, exclude=exclude)


def ggplot(data: pl.DataFrame, mapping: Aes | None = None) -> Plot:
    """Start a plot from a table and an optional plot-level mapping."""
    if not isinstance(data, pl.DataFrame):
        raise PlotSpecError(f"ggplot() needs a polars DataFrame, got {type(data).__name__}")
    return Plot(data=data, mapping=mapping or Aes())
