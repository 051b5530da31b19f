"""
Streamlit application orchestrator for tidytour.

This module composes the sidebar and the page tabs while delegating supporting
concerns to focused modules (app.ui.sidebar, app.ui.helpers, app.data,
app.charts).

Responsibilities:
    - Configure the Streamlit page.
    - Render the sidebar (lesson, dataset, theme, cache preferences).
    - Lesson tab: run the selected lesson and show prose, code, tables, charts.
    - Explorer tab: dataset head, glimpse, column summary and a quick plot.
    - Source tab: the raw lesson document.
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from app import charts as app_charts
from app.data import load_dataset_table, load_lesson_source, run_lesson
from tidytour.config import TourSettings
from tidytour.core.table import column_summary, glimpse

from .helpers import compute_dataset_kpis, split_columns, summarize_outputs
from .sidebar import render_sidebar


def _render_output(out: dict[str, Any], max_rows: int) -> None:
    kind = out["kind"]
    if kind == "table":
        st.caption(out["text"])
        st.dataframe(out["data"].head(max_rows), use_container_width=True)
    elif kind == "chart":
        st.vega_lite_chart(out["data"], use_container_width=False)
    elif kind == "error":
        st.error(out["text"])
    else:
        st.code(out["text"], language="text")


def _render_lesson(items: list[dict[str, Any]], max_rows: int) -> None:
    for item in items:
        if item["kind"] == "prose":
            st.markdown(item["text"])
            continue
        if item["source"] is not None:
            st.code(item["source"], language="python")
        for out in item["outputs"]:
            _render_output(out, max_rows)
        if item["source"] is not None:
            st.caption(f"{item['label']}: {summarize_outputs(item['outputs'])}")


def _render_explorer(name: str, state: Any, settings: TourSettings) -> None:
    df = load_dataset_table(name, cfg=state.cache)

    kpi = compute_dataset_kpis(df)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Rows", kpi["rows"])
    c2.metric("Columns", kpi["columns"])
    c3.metric("Missing cells", kpi["missing_cells"])
    c4.metric("Complete rows", kpi["complete_rows"])

    st.subheader("Head")
    n = int(st.number_input("Rows", min_value=1, max_value=max(1, df.height), value=min(10, max(1, df.height))))
    st.dataframe(df.head(n), use_container_width=True)

    st.subheader("Glimpse")
    st.code(glimpse(df, width=settings.glimpse_width), language="text")

    st.subheader("Columns")
    st.dataframe(column_summary(df), use_container_width=True)

    st.subheader("Quick plot")
    numeric, categorical = split_columns(df)
    columns = df.columns
    x = st.selectbox("x", options=columns, index=columns.index(numeric[0]) if numeric else 0)
    y_choice = st.selectbox("y", options=["(none)"] + columns, index=0)
    color_choice = st.selectbox("color", options=["(none)"] + columns, index=0)
    kind = st.selectbox("Geom", options=list(app_charts.PLOT_KINDS), index=0)
    y = None if y_choice == "(none)" else y_choice
    color = None if color_choice == "(none)" else color_choice
    try:
        chart = app_charts.explorer_chart(
            df,
            x,
            y,
            color=color,
            kind=kind,  # type: ignore[arg-type]
            width=settings.chart_width,
            height=settings.chart_height,
            theme=state.theme,
        )
    except ValueError as e:
        st.info(str(e))
        return
    st.altair_chart(chart, use_container_width=False)
    if categorical:
        st.caption(f"Categorical columns: {', '.join(categorical)}")


def streamlit_app(
    default_lesson: str | None = None,
    default_dataset: str | None = None,
) -> None:
    """Render the tidytour Streamlit application.

    Args:
        default_lesson (str | None): Lesson preselected in the sidebar.
        default_dataset (str | None): Dataset preselected in the explorer.

    Notes:
        - Lessons run with chunk errors captured, so a broken chunk shows its
          error inline instead of stopping the page.
        - Loaders are cached with the CacheConfig chosen in the sidebar.
    """
    st.set_page_config(page_title="tidytour", layout="wide")
    settings = TourSettings.load()
    state = render_sidebar(default_lesson=default_lesson, default_dataset=default_dataset)

    tab_lesson, tab_explorer, tab_source = st.tabs(["Lesson", "Explorer", "Source"])

    with tab_lesson:
        with st.spinner(f"Running {state.lesson} ..."):
            items = run_lesson(state.lesson, theme=state.theme, cfg=state.cache)
        _render_lesson(items, settings.max_rows)

    with tab_explorer:
        _render_explorer(state.dataset, state, settings)

    with tab_source:
        st.code(load_lesson_source(state.lesson, cfg=state.cache), language="markdown")
