"""
Scales, labels and coordinate tweaks.

Each component is added to a Plot with ``+``. Scales are keyed by aesthetic;
adding a second scale for the same aesthetic replaces the first (ggplot2 warns
and does the same).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

import altair as alt

if TYPE_CHECKING:  # pragma: no cover
    from .plot import Plot

__all__ = [
    "Scale",
    "Labels",
    "CoordFlip",
    "labs",
    "xlab",
    "ylab",
    "ggtitle",
    "coord_flip",
    "scale_x_log10",
    "scale_y_log10",
    "scale_x_continuous",
    "scale_y_continuous",
    "scale_color_manual",
    "scale_fill_manual",
    "scale_color_brewer",
    "scale_fill_brewer",
    "scale_color_viridis_c",
    "scale_colour_manual",
    "scale_colour_brewer",
]


@dataclass(frozen=True)
class Scale:
    """
    Scale settings for one aesthetic.

    Attributes:
        aesthetic (str): Aesthetic name ("x", "y", "color", "fill", ...).
        type (str | None): Vega-Lite scale type (e.g. "log").
        domain (tuple | None): Limits or category order.
        range (tuple | None): Output values (colors, sizes).
        scheme (str | None): Named Vega color scheme.
        name (str | None): Axis/legend title override.
    """

    aesthetic: str
    type: str | None = None
    domain: tuple[Any, ...] | None = None
    range: tuple[Any, ...] | None = None
    scheme: str | None = None
    name: str | None = None

    def add_to(self, plot: Plot) -> Plot:
        kept = tuple(s for s in plot.scales if s.aesthetic != self.aesthetic)
        return replace(plot, scales=(*kept, self))

    def to_alt(self) -> alt.Scale | None:
        kwargs: dict[str, Any] = {}
        if self.type is not None:
            kwargs["type"] = self.type
        if self.domain is not None:
            kwargs["domain"] = list(self.domain)
        if self.range is not None:
            kwargs["range"] = list(self.range)
        if self.scheme is not None:
            kwargs["scheme"] = self.scheme
        return alt.Scale(**kwargs) if kwargs else None


def scale_x_log10(name: str | None = None) -> Scale:
    return Scale("x", type="log", name=name)


def scale_y_log10(name: str | None = None) -> Scale:
    return Scale("y", type="log", name=name)


def scale_x_continuous(
    name: str | None = None, *, limits: Sequence[float] | None = None
) -> Scale:
    return Scale("x", domain=tuple(limits) if limits is not None else None, name=name)


def scale_y_continuous(
    name: str | None = None, *, limits: Sequence[float] | None = None
) -> Scale:
    return Scale("y", domain=tuple(limits) if limits is not None else None, name=name)


def _manual(aesthetic: str, values: Mapping[Any, str] | Sequence[str], name: str | None) -> Scale:
    if isinstance(values, Mapping):
        return Scale(aesthetic, domain=tuple(values.keys()), range=tuple(values.values()), name=name)
    return Scale(aesthetic, range=tuple(values), name=name)


def scale_color_manual(values: Mapping[Any, str] | Sequence[str], name: str | None = None) -> Scale:
    """Fixed colors, either positional or keyed by category (``{"4": "steelblue", ...}``)."""
    return _manual("color", values, name)


def scale_fill_manual(values: Mapping[Any, str] | Sequence[str], name: str | None = None) -> Scale:
    return _manual("fill", values, name)


def scale_color_brewer(palette: str = "Set1", name: str | None = None) -> Scale:
    """ColorBrewer palette by name; Vega's scheme names are the lower-cased Brewer names."""
    return Scale("color", scheme=palette.lower(), name=name)


def scale_fill_brewer(palette: str = "Set1", name: str | None = None) -> Scale:
    return Scale("fill", scheme=palette.lower(), name=name)


def scale_color_viridis_c(name: str | None = None) -> Scale:
    return Scale("color", scheme="viridis", name=name)


scale_colour_manual = scale_color_manual
scale_colour_brewer = scale_color_brewer


@dataclass(frozen=True)
class Labels:
    """Plot title/subtitle and per-aesthetic axis or legend titles."""

    title: str | None = None
    subtitle: str | None = None
    x: str | None = None
    y: str | None = None
    color: str | None = None
    fill: str | None = None
    size: str | None = None
    shape: str | None = None
    alpha: str | None = None

    def add_to(self, plot: Plot) -> Plot:
        return replace(plot, labels=plot.labels.merge(self))

    def merge(self, other: Labels) -> Labels:
        updates = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **updates)

    def for_aesthetic(self, aesthetic: str) -> str | None:
        return getattr(self, aesthetic, None)


def labs(
    *,
    title: str | None = None,
    subtitle: str | None = None,
    x: str | None = None,
    y: str | None = None,
    color: str | None = None,
    colour: str | None = None,
    fill: str | None = None,
    size: str | None = None,
    shape: str | None = None,
    alpha: str | None = None,
) -> Labels:
    return Labels(
        title=title,
        subtitle=subtitle,
        x=x,
        y=y,
        color=color if color is not None else colour,
        fill=fill,
        size=size,
        shape=shape,
        alpha=alpha,
    )


def xlab(label: str) -> Labels:
    return Labels(x=label)


def ylab(label: str) -> Labels:
    return Labels(y=label)


def ggtitle(title: str, subtitle: str | None = None) -> Labels:
    return Labels(title=title, subtitle=subtitle)


@dataclass(frozen=True)
class CoordFlip:
    """Swap the x and y positions of every layer."""

    def add_to(self, plot: Plot) -> Plot:
        return replace(plot, flipped=True)


def coord_flip() -> CoordFlip:
    return CoordFlip()
