from __future__ import annotations

import polars as pl
import pytest

from app.charts import explorer_chart, quick_plot, suggest_kind
from app.data import even_sample
from tidytour.datasets import load_dataset


@pytest.fixture
def cars() -> pl.DataFrame:
    return load_dataset("mtcars")


def test_suggest_kind(cars: pl.DataFrame) -> None:
    assert suggest_kind(cars, "mpg") == "histogram"
    assert suggest_kind(cars, "model") == "bar"
    assert suggest_kind(cars, "model", "mpg") == "boxplot"
    assert suggest_kind(cars, "wt", "mpg") == "point"


def test_quick_plot_auto_kinds(cars: pl.DataFrame) -> None:
    hist = quick_plot(cars, "mpg").to_dict()
    bars = quick_plot(cars, "cyl", kind="bar").to_dict()

    assert hist["encoding"]["x"]["bin"] == {"maxbins": 20}
    assert bars["encoding"]["x"]["type"] == "nominal"
    assert bars["encoding"]["y"]["aggregate"] == "count"


def test_quick_plot_colour_with_few_values_is_categorical(cars: pl.DataFrame) -> None:
    few = quick_plot(cars, "wt", "mpg", color="cyl").to_dict()
    many = quick_plot(cars, "wt", "mpg", color="hp").to_dict()

    assert few["encoding"]["color"]["type"] == "nominal"
    assert many["encoding"]["color"]["type"] == "quantitative"


def test_quick_plot_errors(cars: pl.DataFrame) -> None:
    with pytest.raises(ValueError):
        quick_plot(cars, "wt", kind="point")
    with pytest.raises(ValueError):
        quick_plot(cars, "wt", "mpg", kind="pie")  # type: ignore[arg-type]


def test_even_sample_stride_and_passthrough() -> None:
    df = pl.DataFrame({"i": list(range(10))})

    assert even_sample(df, 3)["i"].to_list() == [0, 4, 8]
    assert even_sample(df, 10) is df
    with pytest.raises(ValueError):
        even_sample(df, 0)


def test_explorer_chart_size(cars: pl.DataFrame) -> None:
    spec = explorer_chart(cars, "wt", "mpg", max_points=10, width=250, height=150).to_dict()

    assert (spec["width"], spec["height"]) == (250, 150)
    assert spec["mark"]["type"] == "point"
