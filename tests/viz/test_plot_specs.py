from __future__ import annotations

from typing import Any

import altair as alt
import polars as pl
import pytest

from tidytour.core import PlotSpecError
from tidytour.datasets import load_dataset
from tidytour.viz import (
    aes,
    coord_flip,
    facet_grid,
    facet_wrap,
    factor,
    geom_bar,
    geom_boxplot,
    geom_col,
    geom_histogram,
    geom_hline,
    geom_line,
    geom_point,
    geom_smooth,
    geom_text,
    ggplot,
    labs,
    scale_color_brewer,
    scale_color_manual,
    scale_x_log10,
    scale_y_continuous,
    theme_gray,
)


def find_in_spec(obj: Any, predicate) -> bool:
    """Recursively scan a chart spec dict for a predicate match."""
    if isinstance(obj, dict):
        if predicate(obj):
            return True
        return any(find_in_spec(v, predicate) for v in obj.values())
    if isinstance(obj, list):
        return any(find_in_spec(v, predicate) for v in obj)
    return False


def mark_type(d: dict) -> str | None:
    mark = d.get("mark")
    if isinstance(mark, dict):
        return mark.get("type")
    return mark


def has_mark(kind: str):
    return lambda d: mark_type(d) == kind


@pytest.fixture
def cars() -> pl.DataFrame:
    return load_dataset("mtcars")


# 1) Basic layers and encodings


def test_scatter_has_point_mark_and_quantitative_axes(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg")) + geom_point()).to_dict()

    assert mark_type(spec) == "point"
    assert spec["encoding"]["x"] == {"field": "wt", "type": "quantitative"}
    assert spec["encoding"]["y"] == {"field": "mpg", "type": "quantitative"}


def test_factor_colour_mapping_is_nominal(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg", colour=factor("cyl"))) + geom_point()).to_dict()

    assert spec["encoding"]["color"]["field"] == "cyl"
    assert spec["encoding"]["color"]["type"] == "nominal"


def test_string_columns_infer_nominal(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("model", "hp")) + geom_col()).to_dict()

    assert mark_type(spec) == "bar"
    assert spec["encoding"]["x"]["type"] == "nominal"


def test_constant_params_become_mark_properties(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg")) + geom_point(colour="red", alpha=0.5, size=60)).to_dict()

    assert spec["mark"]["color"] == "red"
    assert spec["mark"]["opacity"] == 0.5
    assert spec["mark"]["size"] == 60


# 2) Statistical layers


def test_smooth_lm_layers_points_and_regression_per_group(cars: pl.DataFrame) -> None:
    p = (
        ggplot(cars, aes("wt", "mpg", color=factor("cyl")))
        + geom_point()
        + geom_smooth(method="lm")
    )
    spec = p.to_dict()

    assert len(spec["layer"]) == 2
    assert find_in_spec(spec, has_mark("point"))
    assert find_in_spec(
        spec,
        lambda d: d.get("regression") == "mpg"
        and d.get("on") == "wt"
        and d.get("method") == "linear"
        and d.get("groupby") == ["cyl"],
    )


def test_smooth_default_is_loess(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg")) + geom_smooth(span=0.5)).to_dict()

    assert find_in_spec(spec, lambda d: d.get("loess") == "mpg" and d.get("bandwidth") == 0.5)


def test_bar_counts_rows(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes(factor("cyl"))) + geom_bar()).to_dict()

    assert spec["encoding"]["x"]["type"] == "nominal"
    assert spec["encoding"]["y"]["aggregate"] == "count"
    assert spec["encoding"]["y"]["title"] == "count"


def test_bar_positions(cars: pl.DataFrame) -> None:
    dodge = (ggplot(cars, aes(factor("cyl"), fill=factor("am"))) + geom_bar(position="dodge")).to_dict()
    filled = (ggplot(cars, aes(factor("cyl"), fill=factor("am"))) + geom_bar(position="fill")).to_dict()

    assert dodge["encoding"]["xOffset"]["field"] == "am"
    assert filled["encoding"]["y"]["stack"] == "normalize"


def test_histogram_bins(cars: pl.DataFrame) -> None:
    by_width = (ggplot(cars, aes("mpg")) + geom_histogram(binwidth=2.5)).to_dict()
    by_count = (ggplot(cars, aes("mpg")) + geom_histogram(bins=10)).to_dict()

    assert by_width["encoding"]["x"]["bin"] == {"step": 2.5}
    assert by_count["encoding"]["x"]["bin"] == {"maxbins": 10}
    assert by_width["encoding"]["y"]["aggregate"] == "count"


def test_boxplot_and_line(cars: pl.DataFrame) -> None:
    box = (ggplot(cars, aes(factor("gear"), "mpg")) + geom_boxplot()).to_dict()
    line = (ggplot(cars, aes("wt", "mpg")) + geom_line(linetype="dashed")).to_dict()

    assert mark_type(box) == "boxplot"
    assert mark_type(line) == "line"
    assert line["mark"]["strokeDash"] == [6, 4]


def test_reference_line_uses_datum(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg")) + geom_point() + geom_hline(yintercept=20)).to_dict()

    assert find_in_spec(spec, lambda d: mark_type(d) == "rule" and d.get("encoding", {}).get("y") == {"datum": 20.0})


# 3) Facets, scales, labels, themes, coordinates


def test_facet_wrap_columns_and_ordinal_numeric_key(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("hp", "mpg")) + geom_point() + facet_wrap("am", ncol=2)).to_dict()

    assert spec["facet"] == {"field": "am", "type": "ordinal"}
    assert spec["columns"] == 2
    assert mark_type(spec["spec"]) == "point"


def test_facet_grid_rows_and_cols(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("hp", "mpg")) + geom_point() + facet_grid(rows="am", cols="gear")).to_dict()

    assert spec["facet"]["row"]["field"] == "am"
    assert spec["facet"]["column"]["field"] == "gear"


def test_facet_grid_needs_a_dimension() -> None:
    with pytest.raises(ValueError):
        facet_grid()


def test_scales_and_labels(cars: pl.DataFrame) -> None:
    p = (
        ggplot(cars, aes("hp", "mpg", color=factor("cyl")))
        + geom_point()
        + scale_x_log10()
        + scale_y_continuous("Miles per gallon", limits=(10, 35))
        + scale_color_brewer("Dark2")
        + labs(title="Power vs mileage", subtitle="1974", x="Horsepower", color="Cylinders")
    )
    spec = p.to_dict()
    enc = spec["encoding"]

    assert enc["x"]["scale"] == {"type": "log"}
    assert enc["x"]["title"] == "Horsepower"
    assert enc["y"]["scale"] == {"domain": [10, 35]}
    assert enc["y"]["title"] == "Miles per gallon"
    assert enc["color"]["scale"] == {"scheme": "dark2"}
    assert enc["color"]["title"] == "Cylinders"
    assert spec["title"] == {"text": "Power vs mileage", "subtitle": "1974"}


def test_later_scale_replaces_earlier_one(cars: pl.DataFrame) -> None:
    p = (
        ggplot(cars, aes("wt", "mpg", color=factor("am")))
        + geom_point()
        + scale_color_brewer()
        + scale_color_manual({"0": "gray", "1": "tomato"})
    )

    assert len(p.scales) == 1
    assert p.to_dict()["encoding"]["color"]["scale"] == {"domain": ["0", "1"], "range": ["gray", "tomato"]}


def test_themes_configure_top_level(cars: pl.DataFrame) -> None:
    minimal = (ggplot(cars, aes("wt", "mpg")) + geom_point()).to_dict()
    gray = (ggplot(cars, aes("wt", "mpg")) + geom_point() + theme_gray()).to_dict()

    assert minimal["config"]["view"]["strokeOpacity"] == 0
    assert gray["config"]["view"]["fill"] == "#EBEBEB"


def test_coord_flip_swaps_positions(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("model", "hp")) + geom_col() + coord_flip()).to_dict()

    assert spec["encoding"]["y"]["field"] == "model"
    assert spec["encoding"]["x"]["field"] == "hp"


def test_size_is_applied(cars: pl.DataFrame) -> None:
    spec = (ggplot(cars, aes("wt", "mpg")) + geom_point()).to_dict(width=300, height=200)

    assert spec["width"] == 300
    assert spec["height"] == 200


def test_compiles_to_altair_chart(cars: pl.DataFrame) -> None:
    chart = (ggplot(cars, aes("wt", "mpg")) + geom_point()).to_altair()
    assert isinstance(chart, alt.TopLevelMixin)


def test_temporal_columns_are_serialized() -> None:
    from datetime import date

    df = pl.DataFrame({"d": [date(2024, 1, 1), date(2024, 1, 2)], "v": [1, 2]})
    spec = (ggplot(df, aes("d", "v")) + geom_line()).to_dict()

    assert spec["encoding"]["x"]["type"] == "temporal"
    assert find_in_spec(spec, lambda d: d.get("d") == "2024-01-01")


# 4) Immutability and validation


def test_adding_components_returns_new_plot(cars: pl.DataFrame) -> None:
    base = ggplot(cars, aes("wt", "mpg"))
    with_points = base + geom_point()
    with_list = base + [geom_point(), geom_smooth()]

    assert base.layers == ()
    assert len(with_points.layers) == 1
    assert len(with_list.layers) == 2


def test_plot_without_layers_is_an_error(cars: pl.DataFrame) -> None:
    with pytest.raises(PlotSpecError):
        ggplot(cars, aes("wt", "mpg")).to_dict()


def test_unknown_column_is_reported(cars: pl.DataFrame) -> None:
    with pytest.raises(PlotSpecError) as ei:
        (ggplot(cars, aes("weight", "mpg")) + geom_point()).to_dict()
    assert "weight" in str(ei.value)


def test_missing_required_aesthetic(cars: pl.DataFrame) -> None:
    with pytest.raises(PlotSpecError) as ei:
        (ggplot(cars, aes("wt", "mpg")) + geom_text()).to_dict()
    assert "label" in str(ei.value)


def test_ggplot_requires_polars_frame() -> None:
    with pytest.raises(PlotSpecError):
        ggplot({"x": [1]})  # type: ignore[arg-type]


def test_adding_unknown_object_raises_type_error(cars: pl.DataFrame) -> None:
    with pytest.raises(TypeError):
        ggplot(cars, aes("wt", "mpg")) + 3  # type: ignore[operator]
