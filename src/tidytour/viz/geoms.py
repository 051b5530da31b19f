"""
Geometric layers.

A geom turns a merged aesthetic mapping into one Altair chart layer: a mark
(with constant visual parameters) plus encodings, and, for statistical geoms,
a Vega-Lite transform or aggregate (counts, bins, regression, loess).

Constant parameters follow ggplot2 names and are translated to mark properties:
color/colour, fill, alpha -> opacity, size, shape, linewidth -> strokeWidth,
linetype="dashed" -> strokeDash.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, ClassVar, Literal

import altair as alt
import polars as pl

from tidytour.core.errors import PlotSpecError

from .aes import Aes
from .base import FieldRef, infer_field_type
from .scales import Labels, Scale

if TYPE_CHECKING:  # pragma: no cover
    from .plot import Plot

__all__ = [
    "LayerContext",
    "Geom",
    "geom_point",
    "geom_line",
    "geom_area",
    "geom_col",
    "geom_bar",
    "geom_histogram",
    "geom_boxplot",
    "geom_smooth",
    "geom_text",
    "geom_hline",
    "geom_vline",
]

# aesthetic -> (altair encoding keyword, channel class)
_CHANNELS: dict[str, tuple[str, Any]] = {
    "x": ("x", alt.X),
    "y": ("y", alt.Y),
    "color": ("color", alt.Color),
    "fill": ("fill", alt.Fill),
    "size": ("size", alt.Size),
    "shape": ("shape", alt.Shape),
    "alpha": ("opacity", alt.Opacity),
    "label": ("text", alt.Text),
    "group": ("detail", alt.Detail),
}
_SCALED = {"x", "y", "color", "fill", "size", "shape", "alpha"}
_TITLED = _SCALED | {"label"}

_FLIP_KEYS = {"x": "y", "y": "x", "x2": "y2", "y2": "x2", "xOffset": "yOffset", "yOffset": "xOffset"}
_FLIP_CLS: dict[str, Any] = {
    "x": alt.X,
    "y": alt.Y,
    "x2": alt.X2,
    "y2": alt.Y2,
    "xOffset": alt.XOffset,
    "yOffset": alt.YOffset,
}
_FLIP_DATUM: dict[str, Any] = {"x": alt.XDatum, "y": alt.YDatum}

_PARAM_NAMES = {
    "color": "color",
    "colour": "color",
    "fill": "fill",
    "alpha": "opacity",
    "size": "size",
    "shape": "shape",
    "linewidth": "strokeWidth",
}


@dataclass(frozen=True)
class LayerContext:
    """
    Everything a geom needs to build its layer.

    Attributes:
        data (pl.DataFrame): Plot data (used for dtype inference).
        mapping (Aes): Plot mapping merged with the layer mapping.
        scales (Mapping[str, Scale]): Scales keyed by aesthetic.
        labels (Labels): Titles from labs().
        source (Any): ``alt.Data`` for a single-layer plot, Undefined when layers share top-level data.
        flipped (bool): coord_flip() requested.
    """

    data: pl.DataFrame
    mapping: Aes
    scales: Mapping[str, Scale] = field(default_factory=dict)
    labels: Labels = field(default_factory=Labels)
    source: Any = alt.Undefined
    flipped: bool = False

    def has(self, aesthetic: str) -> bool:
        return self.mapping.get(aesthetic) is not None

    def ref(self, aesthetic: str) -> FieldRef:
        ref = self.mapping.get(aesthetic)
        if ref is None:
            raise PlotSpecError(f"aesthetic {aesthetic!r} is not mapped")
        return ref

    def field_type(self, ref: FieldRef) -> str:
        return ref.kind or infer_field_type(self.data.schema[ref.name])

    def title(self, aesthetic: str) -> str | None:
        scale = self.scales.get(aesthetic)
        if scale is not None and scale.name is not None:
            return scale.name
        return self.labels.for_aesthetic(aesthetic)

    def channel(self, aesthetic: str, **extra: Any) -> Any:
        """Build the Altair channel object for a mapped aesthetic."""
        ref = self.ref(aesthetic)
        _, cls = _CHANNELS[aesthetic]
        kwargs: dict[str, Any] = {"field": ref.name, "type": self.field_type(ref)}
        if aesthetic in _TITLED:
            title = self.title(aesthetic)
            if title is not None:
                kwargs["title"] = title
        if aesthetic in _SCALED:
            scale = self.scales.get(aesthetic)
            alt_scale = scale.to_alt() if scale is not None else None
            if alt_scale is not None:
                kwargs["scale"] = alt_scale
        kwargs.update(extra)
        return cls(**kwargs)

    def encodings(self, *aesthetics: str) -> dict[str, Any]:
        """Channels for every listed aesthetic that is mapped, keyed by Altair encoding name."""
        return {_CHANNELS[a][0]: self.channel(a) for a in aesthetics if self.has(a)}

    def count_channel(self, aesthetic: str, **extra: Any) -> Any:
        """A position channel showing the row count (Vega-Lite ``count()``)."""
        _, cls = _CHANNELS[aesthetic]
        kwargs: dict[str, Any] = {
            "aggregate": "count",
            "type": "quantitative",
            "title": self.title(aesthetic) or "count",
        }
        scale = self.scales.get(aesthetic)
        alt_scale = scale.to_alt() if scale is not None else None
        if alt_scale is not None:
            kwargs["scale"] = alt_scale
        kwargs.update(extra)
        return cls(**kwargs)


def _flip(encoding: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in encoding.items():
        target = _FLIP_KEYS.get(key)
        if target is None:
            out[key] = value
            continue
        spec = value.to_dict()
        if "datum" in spec:
            out[target] = _FLIP_DATUM[target](**spec)
        else:
            out[target] = _FLIP_CLS[target](**spec)
    return out


def _mark_props(params: Mapping[str, Any]) -> dict[str, Any]:
    props: dict[str, Any] = {}
    for key, value in params.items():
        if key == "linetype":
            if value == "dashed":
                props["strokeDash"] = [6, 4]
            elif value == "dotted":
                props["strokeDash"] = [1, 3]
            continue
        name = _PARAM_NAMES.get(key, key)
        props[name] = value
    return props


@dataclass(frozen=True)
class Geom:
    """
    Base layer.

    Subclasses set ``mark`` and ``required`` and may override ``encode`` and
    ``transform``. ``inherit_aes=False`` ignores the plot-level mapping.
    """

    mapping: Aes | None = None
    params: Mapping[str, Any] = field(default_factory=dict)
    inherit_aes: bool = True

    mark: ClassVar[str] = "point"
    required: ClassVar[tuple[str, ...]] = ()
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "fill", "alpha", "group")
    default_params: ClassVar[dict[str, Any]] = {}

    def add_to(self, plot: Plot) -> Plot:
        return replace(plot, layers=(*plot.layers, self))

    def layer_mapping(self, plot_mapping: Aes) -> Aes:
        if not self.inherit_aes:
            return self.mapping or Aes()
        return plot_mapping.merge(self.mapping)

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        return ctx.encodings(*self.aesthetics)

    def transform(self, chart: alt.Chart, ctx: LayerContext) -> alt.Chart:
        return chart

    def build(self, ctx: LayerContext) -> alt.Chart:
        missing = [a for a in self.required if not ctx.has(a)]
        if missing:
            raise PlotSpecError(f"{type(self).__name__} requires aesthetics: {missing}")
        props = {**self.default_params, **_mark_props(self.params)}
        chart = getattr(alt.Chart(ctx.source), f"mark_{self.mark}")(**props)
        chart = self.transform(chart, ctx)
        encoding = self.encode(ctx)
        if ctx.flipped:
            encoding = _flip(encoding)
        return chart.encode(**encoding)


@dataclass(frozen=True)
class GeomPoint(Geom):
    mark: ClassVar[str] = "point"
    required: ClassVar[tuple[str, ...]] = ("x", "y")
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "fill", "size", "shape", "alpha")
    default_params: ClassVar[dict[str, Any]] = {"filled": True}


@dataclass(frozen=True)
class GeomLine(Geom):
    mark: ClassVar[str] = "line"
    required: ClassVar[tuple[str, ...]] = ("x", "y")
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "size", "alpha", "group")


@dataclass(frozen=True)
class GeomArea(Geom):
    mark: ClassVar[str] = "area"
    required: ClassVar[tuple[str, ...]] = ("x", "y")
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "fill", "alpha", "group")


Position = Literal["stack", "dodge", "fill"]


def _positioned(ctx: LayerContext, encoding: dict[str, Any], position: str, value_key: str) -> dict[str, Any]:
    """Apply dodge (xOffset by fill/color) or fill (normalized stack) to a bar encoding."""
    if position == "dodge":
        by = "fill" if ctx.has("fill") else "color" if ctx.has("color") else None
        if by is not None:
            ref = ctx.ref(by)
            encoding["xOffset"] = alt.XOffset(field=ref.name, type=ctx.field_type(ref))
    elif position == "fill":
        spec = encoding[value_key].to_dict()
        spec["stack"] = "normalize"
        encoding[value_key] = alt.Y(**spec)
    elif position != "stack":
        raise PlotSpecError(f"unknown position {position!r}; use 'stack', 'dodge' or 'fill'")
    return encoding


@dataclass(frozen=True)
class GeomCol(Geom):
    """Bars with heights taken from the data (``y``)."""

    position: Position = "stack"

    mark: ClassVar[str] = "bar"
    required: ClassVar[tuple[str, ...]] = ("x", "y")
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "fill", "alpha")

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        return _positioned(ctx, ctx.encodings(*self.aesthetics), self.position, "y")


@dataclass(frozen=True)
class GeomBar(Geom):
    """Bars with heights equal to the number of rows per ``x`` value."""

    position: Position = "stack"

    mark: ClassVar[str] = "bar"
    required: ClassVar[tuple[str, ...]] = ("x",)
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "color", "fill", "alpha")

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        encoding = ctx.encodings(*self.aesthetics)
        encoding["y"] = ctx.count_channel("y")
        return _positioned(ctx, encoding, self.position, "y")


@dataclass(frozen=True)
class GeomHistogram(Geom):
    """Binned counts of a numeric ``x``; ``binwidth`` wins over ``bins`` when both are set."""

    bins: int = 30
    binwidth: float | None = None

    mark: ClassVar[str] = "bar"
    required: ClassVar[tuple[str, ...]] = ("x",)
    aesthetics: ClassVar[tuple[str, ...]] = ("color", "fill", "alpha")

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        binning = alt.Bin(step=self.binwidth) if self.binwidth else alt.Bin(maxbins=self.bins)
        encoding = ctx.encodings(*self.aesthetics)
        encoding["x"] = ctx.channel("x", bin=binning, type="quantitative")
        encoding["y"] = ctx.count_channel("y")
        return encoding


@dataclass(frozen=True)
class GeomBoxplot(Geom):
    mark: ClassVar[str] = "boxplot"
    required: ClassVar[tuple[str, ...]] = ("y",)
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "color", "fill")


@dataclass(frozen=True)
class GeomSmooth(Geom):
    """
    Fitted trend line: ``method="lm"`` (linear regression) or ``"loess"``.

    Color/group mappings split the fit per group.
    """

    method: Literal["lm", "loess"] = "loess"
    span: float = 0.75

    mark: ClassVar[str] = "line"
    required: ClassVar[tuple[str, ...]] = ("x", "y")
    aesthetics: ClassVar[tuple[str, ...]] = ("color", "group")

    def _groupby(self, ctx: LayerContext) -> list[str]:
        return [ctx.ref(a).name for a in ("color", "group") if ctx.has(a)]

    def transform(self, chart: alt.Chart, ctx: LayerContext) -> alt.Chart:
        x, y = ctx.ref("x").name, ctx.ref("y").name
        groupby = self._groupby(ctx) or alt.Undefined
        if self.method == "lm":
            return chart.transform_regression(x, y, method="linear", groupby=groupby)
        if self.method == "loess":
            return chart.transform_loess(x, y, groupby=groupby, bandwidth=self.span)
        raise PlotSpecError(f"unknown smoothing method {self.method!r}; use 'lm' or 'loess'")

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        encoding = ctx.encodings(*self.aesthetics)
        encoding["x"] = ctx.channel("x", type="quantitative")
        encoding["y"] = ctx.channel("y", type="quantitative")
        return encoding


@dataclass(frozen=True)
class GeomText(Geom):
    mark: ClassVar[str] = "text"
    required: ClassVar[tuple[str, ...]] = ("x", "y", "label")
    aesthetics: ClassVar[tuple[str, ...]] = ("x", "y", "label", "color", "size", "alpha")


@dataclass(frozen=True)
class _Reference(Geom):
    value: float = 0.0

    mark: ClassVar[str] = "rule"
    axis: ClassVar[str] = "y"

    def encode(self, ctx: LayerContext) -> dict[str, Any]:
        datum = alt.YDatum(self.value) if self.axis == "y" else alt.XDatum(self.value)
        return {self.axis: datum}


@dataclass(frozen=True)
class GeomHline(_Reference):
    axis: ClassVar[str] = "y"


@dataclass(frozen=True)
class GeomVline(_Reference):
    axis: ClassVar[str] = "x"


# ----------------------------
# Constructors (ggplot2 names)
# ----------------------------


def geom_point(mapping: Aes | None = None, **params: Any) -> GeomPoint:
    return GeomPoint(mapping=mapping, params=params)


def geom_line(mapping: Aes | None = None, **params: Any) -> GeomLine:
    return GeomLine(mapping=mapping, params=params)


def geom_area(mapping: Aes | None = None, **params: Any) -> GeomArea:
    return GeomArea(mapping=mapping, params=params)


def geom_col(mapping: Aes | None = None, *, position: Position = "stack", **params: Any) -> GeomCol:
    return GeomCol(mapping=mapping, params=params, position=position)


def geom_bar(mapping: Aes | None = None, *, position: Position = "stack", **params: Any) -> GeomBar:
    return GeomBar(mapping=mapping, params=params, position=position)


def geom_histogram(
    mapping: Aes | None = None,
    *,
    bins: int = 30,
    binwidth: float | None = None,
    **params: Any,
) -> GeomHistogram:
    return GeomHistogram(mapping=mapping, params=params, bins=bins, binwidth=binwidth)


def geom_boxplot(mapping: Aes | None = None, **params: Any) -> GeomBoxplot:
    return GeomBoxplot(mapping=mapping, params=params)


def geom_smooth(
    mapping: Aes | None = None,
    *,
    method: Literal["lm", "loess"] = "loess",
    span: float = 0.75,
    **params: Any,
) -> GeomSmooth:
    return GeomSmooth(mapping=mapping, params=params, method=method, span=span)


def geom_text(mapping: Aes | None = None, **params: Any) -> GeomText:
    return GeomText(mapping=mapping, params=params)


def geom_hline(*, yintercept: float, **params: Any) -> GeomHline:
    return GeomHline(params=params, value=float(yintercept), inherit_aes=False)


def geom_vline(*, xintercept: float, **params: Any) -> GeomVline:
    return GeomVline(params=params, value=float(xintercept), inherit_aes=False)
