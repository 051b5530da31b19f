"""
tidytour — A runnable tour of the tidy data-analysis workflow.

## Responsibilities
- Provide tidyverse-flavoured call-throughs over Polars (tables, verbs, reshape).
- Provide a grammar-of-graphics layer that compiles to Altair/Vega-Lite charts.
- Parse, execute and render literate lesson documents to static reports.

## Public API
- core — tibble/tribble construction, dplyr-style verbs, tidyr-style reshaping.
- viz — ggplot-style composition (aes, geoms, scales, facets, labels, themes).
- datasets — bundled example tables (mtcars, table1..table4b).
- report — literate document model, chunk executor, HTML/Markdown renderers.
- lessons — bundled lesson documents.
- config — TourSettings (env > TOML > defaults).

## Examples
```python
from tidytour.core import count, group_by, summarize
from tidytour.datasets import load_dataset
import polars as pl

cars = load_dataset("mtcars")
count(cars, "cyl")
summarize(group_by(cars, "cyl"), mpg=pl.col("mpg").mean())
```
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
