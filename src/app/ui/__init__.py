"""
tidytour App UI package.

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - sidebar: Lesson picker, dataset picker, theme and cache preferences.
    - helpers: Small Polars-only helpers (dataset KPIs, column classification).

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_lesson="tidy_workflow", default_dataset="mtcars")
"""

from __future__ import annotations

from .app import streamlit_app
from .sidebar import render_sidebar

__all__ = [
    "streamlit_app",
    "render_sidebar",
]
