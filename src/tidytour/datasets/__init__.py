"""
Bundled example tables.

The CSV files under ``tidytour/datasets/data`` are package data; they are read
with Polars on every call (no caching, the tables are tiny). Column dtypes are pinned per dataset.

Datasets
- mtcars — 32 cars from the 1974 Motor Trend road tests (fuel use and design).
- table1 — tuberculosis cases and population, one row per country-year (tidy).
- table2 — same data, one row per country-year-variable ("type"/"count").
- table3 — same data with cases and population pasted into "rate".
- table4a / table4b — cases / population spread across year columns.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from importlib import resources

import polars as pl

__all__ = ["DatasetInfo", "DATASETS", "list_datasets", "load_dataset"]


@dataclass(frozen=True)
class DatasetInfo:
    """Catalog entry for a bundled dataset."""

    name: str
    title: str
    tidy: bool


DATASETS: dict[str, DatasetInfo] = {
    info.name: info
    for info in (
        DatasetInfo("mtcars", "Motor Trend car road tests (1974)", tidy=True),
        DatasetInfo("table1", "TB cases and population, one row per country-year", tidy=True),
        DatasetInfo("table2", "TB data with variables stored in a type/count pair", tidy=False),
        DatasetInfo("table3", "TB data with cases and population pasted into a rate", tidy=False),
        DatasetInfo("table4a", "TB cases with years spread across columns", tidy=False),
        DatasetInfo("table4b", "TB population with years spread across columns", tidy=False),
    )
}


_INT = pl.Int64
_FLOAT = pl.Float64

# Column dtypes pinned at load time.
_SCHEMAS: dict[str, dict[str, type[pl.DataType]]] = {
    "mtcars": {
        "model": pl.String,
        **{c: _FLOAT for c in ("mpg", "disp", "drat", "wt", "qsec")},
        **{c: _INT for c in ("cyl", "hp", "vs", "am", "gear", "carb")},
    },
    "table1": {"country": pl.String, "year": _INT, "cases": _INT, "population": _INT},
    "table2": {"country": pl.String, "year": _INT, "type": pl.String, "count": _INT},
    "table3": {"country": pl.String, "year": _INT, "rate": pl.String},
    "table4a": {"country": pl.String, "1999": _INT, "2000": _INT},
    "table4b": {"country": pl.String, "1999": _INT, "2000": _INT},
}


def list_datasets() -> list[DatasetInfo]:
    return list(DATASETS.values())


def load_dataset(name: str) -> pl.DataFrame:
    """
    Load a bundled dataset by name.

    Raises:
        KeyError: For unknown names; the message lists the known ones.
    """
    if name not in DATASETS:
        raise KeyError(f"unknown dataset {name!r}; known datasets: {sorted(DATASETS)}")
    raw = resources.files(__package__).joinpath("data", f"{name}.csv").read_bytes()
    return pl.read_csv(io.BytesIO(raw), schema_overrides=_SCHEMAS.get(name))
