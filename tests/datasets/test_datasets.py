from __future__ import annotations

import polars as pl
import pytest

from tidytour.datasets import DATASETS, list_datasets, load_dataset


def test_catalog_lists_every_bundled_table() -> None:
    names = [info.name for info in list_datasets()]
    assert names == ["mtcars", "table1", "table2", "table3", "table4a", "table4b"]
    assert DATASETS["table1"].tidy is True
    assert DATASETS["table2"].tidy is False


@pytest.mark.parametrize("name", list(DATASETS))
def test_every_dataset_loads(name: str) -> None:
    df = load_dataset(name)
    assert isinstance(df, pl.DataFrame)
    assert df.height > 0


def test_mtcars_shape_and_types() -> None:
    cars = load_dataset("mtcars")
    assert cars.shape == (32, 12)
    assert cars.columns[:3] == ["model", "mpg", "cyl"]
    assert cars.schema["cyl"] == pl.Int64
    assert cars.schema["wt"] == pl.Float64


@pytest.mark.parametrize(
    ("name", "column", "dtype"),
    [
        ("table1", "year", pl.Int64),
        ("table1", "population", pl.Int64),
        ("table2", "count", pl.Int64),
        ("table3", "rate", pl.String),
        ("table4a", "1999", pl.Int64),
        ("table4b", "2000", pl.Int64),
        ("mtcars", "mpg", pl.Float64),
        ("mtcars", "carb", pl.Int64),
    ],
)
def test_dataset_column_dtypes_are_pinned(name: str, column: str, dtype: type[pl.DataType]) -> None:
    assert load_dataset(name).schema[column] == dtype


def test_tb_tables_describe_the_same_data() -> None:
    table1 = load_dataset("table1")
    table2 = load_dataset("table2")
    table4a = load_dataset("table4a")
    table4b = load_dataset("table4b")

    assert table1.shape == (6, 4)
    assert table2.height == 2 * table1.height
    assert table4a.columns == ["country", "1999", "2000"]
    assert table4a["1999"].to_list() == table1.filter(pl.col("year") == 1999)["cases"].to_list()
    assert table4b["2000"].to_list() == table1.filter(pl.col("year") == 2000)["population"].to_list()


def test_unknown_dataset_lists_known_names() -> None:
    with pytest.raises(KeyError) as ei:
        load_dataset("iris")
    assert "mtcars" in str(ei.value)
