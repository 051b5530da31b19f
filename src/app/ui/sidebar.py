"""
Sidebar (global controls) for the tidytour Streamlit application.

This module renders the sidebar controls:
- Lesson selection.
- Dataset selection for the explorer.
- Theme selection and cache preferences.
- Construction of a CacheConfig used by data loaders.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from app.data import CacheConfig
from tidytour.datasets import DATASETS
from tidytour.lessons import list_lessons


@dataclass(frozen=True)
class SidebarState:
    lesson: str
    dataset: str
    theme: str
    cache: CacheConfig


def _index(options: list[str], preferred: str | None) -> int:
    return options.index(preferred) if preferred in options else 0


def render_sidebar(
    *,
    default_lesson: str | None = None,
    default_dataset: str | None = None,
) -> SidebarState:
    """Render the sidebar and return the current selections.

    Args:
        default_lesson (str | None): Lesson preselected on first render.
        default_dataset (str | None): Dataset preselected on first render.

    Returns:
        SidebarState: Selected lesson, dataset, theme and the cache config for
        app.data loaders.
    """
    if "theme_choice" not in st.session_state:
        st.session_state["theme_choice"] = "minimal"
    if "cache_ttl" not in st.session_state:
        st.session_state["cache_ttl"] = 600
    if "cache_persist" not in st.session_state:
        st.session_state["cache_persist"] = False

    st.sidebar.markdown("### tidytour")

    lessons = list_lessons()
    lesson = st.sidebar.selectbox(
        "Lesson",
        options=lessons,
        index=_index(lessons, default_lesson),
        key="lesson_selector",
    )

    datasets = list(DATASETS)
    dataset = st.sidebar.selectbox(
        "Dataset",
        options=datasets,
        index=_index(datasets, default_dataset),
        format_func=lambda name: f"{name} ({'tidy' if DATASETS[name].tidy else 'untidy'})",
        key="dataset_selector",
    )
    st.sidebar.caption(DATASETS[dataset].title)

    theme = st.sidebar.selectbox(
        "Chart theme",
        options=["minimal", "gray"],
        index=0 if st.session_state["theme_choice"] == "minimal" else 1,
        key="theme_choice_sidebar",
    )
    st.session_state["theme_choice"] = theme

    with st.sidebar.expander("Cache", expanded=False):
        ttl = st.number_input(
            "Cache TTL (seconds)",
            min_value=0,
            value=int(st.session_state["cache_ttl"]),
            step=60,
            help="0 disables TTL",
            key="cache_ttl_sidebar",
        )
        persist = st.checkbox(
            "Persist to disk",
            value=bool(st.session_state["cache_persist"]),
            key="cache_persist_sidebar",
        )
        st.session_state["cache_ttl"] = int(ttl)
        st.session_state["cache_persist"] = bool(persist)
        if st.button("Clear cache"):
            st.cache_data.clear()
            st.rerun()

    cache_cfg = CacheConfig(
        ttl=int(st.session_state["cache_ttl"]) if int(st.session_state["cache_ttl"]) > 0 else None,
        persist=bool(st.session_state["cache_persist"]),
    )
    return SidebarState(lesson=lesson, dataset=dataset, theme=theme, cache=cache_cfg)
