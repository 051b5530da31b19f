"""
tidytour.viz — ggplot-style plot composition compiled to Altair.

## Responsibilities
- Compose plots from data, aesthetic mappings and layers with ``+``.
- Compile to Vega-Lite through Altair; never draw pixels directly.
- Validate mappings against the data before compiling.

## Public API
- aes, factor, ordered — aesthetic mappings.
- ggplot, Plot — plot container; ``Plot.to_altair()`` / ``Plot.to_dict()``.
- geom_* — point, line, area, col, bar, histogram, boxplot, smooth, text, hline, vline.
- scale_* — log10, continuous limits, manual/brewer/viridis colors.
- labs, xlab, ylab, ggtitle — titles.
- facet_wrap, facet_grid — small multiples.
- theme_minimal, theme_gray — chart configuration.
- coord_flip — swap positions.
- save — HTML, PNG, SVG export.

## Examples
```python
from tidytour.datasets import load_dataset
from tidytour.viz import aes, factor, geom_point, geom_smooth, ggplot, labs

cars = load_dataset("mtcars")
p = (
    ggplot(cars, aes("wt", "mpg", color=factor("cyl")))
    + geom_point()
    + geom_smooth(method="lm")
    + labs(title="Heavier cars use more fuel", x="Weight (1000 lbs)", y="Miles per gallon")
)
chart = p.to_altair(width=400, height=300)  # doctest: +SKIP
```
"""

from __future__ import annotations

from .aes import AES_NAMES, Aes, aes
from .base import FieldRef, factor, infer_field_type, ordered
from .facets import FacetGrid, FacetWrap, facet_grid, facet_wrap
from .geoms import (
    Geom,
    geom_area,
    geom_bar,
    geom_boxplot,
    geom_col,
    geom_histogram,
    geom_hline,
    geom_line,
    geom_point,
    geom_smooth,
    geom_text,
    geom_vline,
)
from .plot import Plot, ggplot
from .save import save
from .scales import (
    Labels,
    Scale,
    coord_flip,
    ggtitle,
    labs,
    scale_color_brewer,
    scale_color_manual,
    scale_color_viridis_c,
    scale_colour_brewer,
    scale_colour_manual,
    scale_fill_brewer,
    scale_fill_manual,
    scale_x_continuous,
    scale_x_log10,
    scale_y_continuous,
    scale_y_log10,
    xlab,
    ylab,
)
from .theme import Theme, theme_gray, theme_grey, theme_minimal

__all__ = [
    "AES_NAMES",
    "Aes",
    "aes",
    "FieldRef",
    "factor",
    "ordered",
    "infer_field_type",
    "Plot",
    "ggplot",
    "Geom",
    "geom_area",
    "geom_bar",
    "geom_boxplot",
    "geom_col",
    "geom_histogram",
    "geom_hline",
    "geom_line",
    "geom_point",
    "geom_smooth",
    "geom_text",
    "geom_vline",
    "Scale",
    "Labels",
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
    "scale_colour_manual",
    "scale_fill_manual",
    "scale_color_brewer",
    "scale_colour_brewer",
    "scale_fill_brewer",
    "scale_color_viridis_c",
    "FacetWrap",
    "FacetGrid",
    "facet_wrap",
    "facet_grid",
    "Theme",
    "theme_minimal",
    "theme_gray",
    "theme_grey",
    "save",
]
