"""
Chart themes mapped onto Altair top-level configuration.

Themes only set ``configure_*`` properties, so they must be applied to the
outermost chart (after layering and faceting).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .plot import Plot

__all__ = ["Theme", "theme_minimal", "theme_gray", "theme_grey", "theme_by_name"]


@dataclass(frozen=True)
class Theme:
    name: str
    base_size: int = 12

    def add_to(self, plot: Plot) -> Plot:
        return replace(plot, theme=self)

    def apply(self, chart: Any) -> Any:
        size = self.base_size
        axis: dict[str, Any] = {"labelFontSize": size, "titleFontSize": size, "domain": False}
        if self.name == "gray":
            axis.update(gridColor="white", tickColor="#333333")
            view: dict[str, Any] = {"fill": "#EBEBEB", "stroke": None}
        else:
            axis.update(grid=True, gridColor="#EBEBEB", ticks=False)
            view = {"strokeOpacity": 0}
        return (
            chart.configure_axis(**axis)
            .configure_legend(labelFontSize=size, titleFontSize=size)
            .configure_title(fontSize=size + 2, anchor="start")
            .configure_view(**view)
        )


def theme_minimal(base_size: int = 12) -> Theme:
    return Theme("minimal", base_size)


def theme_gray(base_size: int = 12) -> Theme:
    return Theme("gray", base_size)


theme_grey = theme_gray


def theme_by_name(name: str) -> Theme:
    if name in ("gray", "grey"):
        return theme_gray()
    return theme_minimal()
