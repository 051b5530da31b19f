from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

import polars as pl
import streamlit as st

from tidytour.config import TourSettings
from tidytour.datasets import load_dataset
from tidytour.lessons import load_lesson, read_lesson
from tidytour.report.executor import ExecutedChunk, execute_document

__all__ = [
    "CacheConfig",
    "load_dataset_table",
    "load_lesson_source",
    "run_lesson",
    "lesson_items",
    "even_sample",
]

# ---------- Cache configuration (factory of cached callables) ----------


@dataclass(frozen=True)
class CacheConfig:
    """Hashable cache configuration for Streamlit @st.cache_data.

    Note: Streamlit's decorator parameters (ttl, persist) are fixed at decoration
    time. We build and memoize decorated callables per (name, ttl, persist) so the
    app can switch these at runtime while still benefiting from caching.
    """

    ttl: int | None = None
    persist: bool = False


# Registry of decorated functions by (loader_name, CacheConfig)
_CACHE_REGISTRY: dict[tuple[str, CacheConfig], Callable[..., Any]] = {}


def _get_cached(loader_name: str, cfg: CacheConfig, fn: Callable[..., Any]) -> Callable[..., Any]:
    key = (loader_name, cfg)
    if key in _CACHE_REGISTRY:
        return _CACHE_REGISTRY[key]
    if cfg.persist:
        wrapped = st.cache_data(persist="disk", ttl=cfg.ttl)(fn)
    else:
        wrapped = st.cache_data(ttl=cfg.ttl)(fn)
    _CACHE_REGISTRY[key] = wrapped
    return wrapped


# ---------- Lesson flattening ----------


def lesson_items(executed: Any) -> list[dict[str, Any]]:
    """Flatten an ExecutedDocument into picklable dicts for caching and display.

    Args:
        executed (ExecutedDocument): Result of tidytour.report.execute_document.

    Returns:
        list[dict[str, Any]]: ``{"kind": "prose", "text"}`` or
        ``{"kind": "chunk", "label", "source", "outputs"}`` entries in document
        order. ``source`` is None when the chunk hides its code; ``outputs``
        holds only the visible outputs as ``{"kind", "text", "data"}``.
    """
    items: list[dict[str, Any]] = []
    for item in executed:
        if isinstance(item, ExecutedChunk):
            items.append(
                {
                    "kind": "chunk",
                    "label": item.label,
                    "source": item.chunk.source if item.show_source else None,
                    "outputs": [
                        {"kind": o.kind, "text": o.text, "data": o.data} for o in item.visible_outputs()
                    ],
                }
            )
        else:
            items.append({"kind": "prose", "text": item.text})
    return items


# ---------- Loaders (internal implementations) ----------


def _load_dataset_impl(name: str) -> pl.DataFrame:
    return load_dataset(name)


def _load_lesson_source_impl(name: str) -> str:
    return read_lesson(name)


def _run_lesson_impl(name: str, theme: str = "minimal", halt_on_error: bool = False) -> list[dict[str, Any]]:
    """Execute a bundled lesson; chunk errors are captured unless ``halt_on_error``."""
    settings = replace(TourSettings.load(), theme=theme, halt_on_error=halt_on_error)
    executed = execute_document(load_lesson(name), settings=settings)
    return lesson_items(executed)


# ---------- Public loader APIs (dispatch to cached implementations) ----------


def load_dataset_table(name: str, *, cfg: CacheConfig = CacheConfig()) -> pl.DataFrame:
    fn = _get_cached("load_dataset_table", cfg, _load_dataset_impl)
    return fn(name)  # type: ignore[no-any-return]


def load_lesson_source(name: str, *, cfg: CacheConfig = CacheConfig()) -> str:
    fn = _get_cached("load_lesson_source", cfg, _load_lesson_source_impl)
    return fn(name)  # type: ignore[no-any-return]


def run_lesson(
    name: str, *, theme: str = "minimal", cfg: CacheConfig = CacheConfig()
) -> list[dict[str, Any]]:
    """Executed lesson items (see lesson_items), cached per lesson name and theme."""
    fn = _get_cached("run_lesson", cfg, _run_lesson_impl)
    return fn(name, theme)  # type: ignore[no-any-return]


# ---------- Downsampling helpers (Polars-first) ----------


def even_sample(df: pl.DataFrame, max_points: int) -> pl.DataFrame:
    """Evenly-spaced rows capping the point count of explorer charts.

    - Compute stride = ceil(n / max_points) and keep every stride-th row
    - Deterministic for fixed input
    """
    if max_points <= 0:
        raise ValueError("max_points must be positive")
    n = df.height
    if n <= max_points:
        return df
    stride = max((n + max_points - 1) // max_points, 1)
    return df.with_row_index(name="_rn").filter(pl.col("_rn") % stride == 0).drop("_rn")
