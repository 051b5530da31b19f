"""
tidytour defaults.

Single source of truth for the defaults consumed by tidytour.config.TourSettings,
the renderers and the chart builder. Zero-IO, stdlib only.

Notes:
    - Changing a default here changes TourSettings() and every renderer that falls back to it.
    - Chart sizes are Vega-Lite pixels.
"""

from __future__ import annotations

__all__ = [
    "OUTPUT_DIR",
    "OUTPUT_FORMAT",
    "MAX_ROWS",
    "GLIMPSE_WIDTH",
    "CHART_WIDTH",
    "CHART_HEIGHT",
    "THEME",
    "VEGA_CDN",
    "ENV_PREFIX",
]

# Directory where rendered reports are written when no explicit path is given.
OUTPUT_DIR: str = "out"

# Report format used when neither the CLI nor the output suffix decides ("html" | "md").
OUTPUT_FORMAT: str = "html"

# Rows shown when a table is printed in a report (the tibble default is 10).
MAX_ROWS: int = 10

# Character width of a glimpse() overview.
GLIMPSE_WIDTH: int = 80

CHART_WIDTH: int = 400
CHART_HEIGHT: int = 300

# Default chart theme ("minimal" | "gray").
THEME: str = "minimal"

# Base URL for the vega, vega-lite and vega-embed scripts embedded in HTML reports.
VEGA_CDN: str = "https://cdn.jsdelivr.net/npm"

ENV_PREFIX: str = "TIDYTOUR_"
