"""
Top-level Streamlit app package.

This package hosts the interactive lesson viewer and dataset explorer,
decoupled from the tidytour library modules. Rendering logic (parsing,
executing chunks, compiling plots) stays in tidytour.*; the Streamlit shell
and app-specific helpers live here.

CLI entrypoint (configured in pyproject.toml):
    tidytour-app = app.main:main
"""

from __future__ import annotations
