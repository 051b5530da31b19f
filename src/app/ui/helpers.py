"""
Shared UI helper utilities for the tidytour Streamlit application.

This module centralizes small cross-cutting helpers (dataset KPIs, column
classification, chunk output captions) used by multiple UI components. Keeping
these here avoids circular imports and keeps the page module lean.

Notes:
    - Functions are Polars-only and contain no Streamlit state manipulation.
"""

from __future__ import annotations

import polars as pl

from tidytour.viz import infer_field_type


def compute_dataset_kpis(df: pl.DataFrame) -> dict[str, int]:
    """Compute headline numbers for the dataset explorer.

    Args:
        df (pl.DataFrame): Dataset table.

    Returns:
        dict[str, int]: Keys ``rows``, ``columns``, ``missing_cells`` (total nulls)
        and ``complete_rows`` (rows without any null).
    """
    if df.width == 0:
        return {"rows": df.height, "columns": 0, "missing_cells": 0, "complete_rows": df.height}
    missing = int(sum(df.null_count().row(0)))
    complete = df.drop_nulls().height
    return {"rows": df.height, "columns": df.width, "missing_cells": missing, "complete_rows": complete}


def split_columns(df: pl.DataFrame) -> tuple[list[str], list[str]]:
    """Return (numeric, categorical) column names in table order.

    Temporal columns count as numeric (they plot on a continuous axis).
    """
    numeric: list[str] = []
    categorical: list[str] = []
    for name, dtype in df.schema.items():
        if infer_field_type(dtype) in ("quantitative", "temporal"):
            numeric.append(name)
        else:
            categorical.append(name)
    return numeric, categorical


def summarize_outputs(outputs: list[dict]) -> str:
    """One-line caption for a chunk's outputs, e.g. ``"1 table, 1 chart"``."""
    counts: dict[str, int] = {}
    for o in outputs:
        counts[o["kind"]] = counts.get(o["kind"], 0) + 1
    if not counts:
        return "no output"
    parts = []
    for kind in ("table", "chart", "stdout", "text", "error"):
        k = counts.get(kind, 0)
        if k:
            noun = "printed output" if kind == "stdout" else kind
            parts.append(f"{k} {noun}{'s' if k > 1 and kind != 'stdout' else ''}")
    return ", ".join(parts)
