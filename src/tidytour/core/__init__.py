"""
Core table toolkit: construction, verbs, reshaping, errors, defaults.

## Contracts
- Tables are plain ``polars.DataFrame`` objects; every function here is pure.
- Grouped operations use GroupedFrame (frame + key names).
- Library errors propagate unchanged; tidytour.core.errors covers only structural checks.

## Modules
- table — tibble, tribble, as_tibble, glimpse, column_summary.
- verbs — select, filter_rows, mutate, rename, arrange, distinct, slice_*,
  group_by, summarize, count, joins, pipe/verb.
- reshape — pivot_longer, pivot_wider, separate, unite, drop_na, fill,
  replace_na, complete.
- errors — TidyError hierarchy.
- constants — package defaults.

## Examples
```python
import polars as pl
from tidytour.core import arrange, desc, filter_rows, group_by, pipe, summarize, verb

pipe(
    cars,
    verb(filter_rows, pl.col("hp") > 100),
    verb(group_by, "cyl"),
    verb(summarize, mpg=pl.col("mpg").mean()),
    verb(arrange, desc("mpg")),
)
```
"""

from __future__ import annotations

from .errors import (
    ChunkExecutionError,
    DocumentError,
    PlotSpecError,
    ReshapeError,
    TableError,
    TidyError,
)
from .reshape import (
    complete,
    drop_na,
    fill,
    pivot_longer,
    pivot_wider,
    replace_na,
    separate,
    unite,
)
from .table import as_tibble, check_rectangular, column_summary, glimpse, tibble, tribble, type_abbr
from .verbs import (
    Desc,
    GroupedFrame,
    anti_join,
    arrange,
    count,
    desc,
    distinct,
    filter_rows,
    full_join,
    group_by,
    inner_join,
    left_join,
    mutate,
    n,
    n_distinct,
    pipe,
    rename,
    select,
    semi_join,
    slice_head,
    slice_max,
    slice_min,
    slice_tail,
    summarize,
    ungroup,
    verb,
)

__all__ = [
    # errors
    "TidyError",
    "TableError",
    "ReshapeError",
    "PlotSpecError",
    "DocumentError",
    "ChunkExecutionError",
    # table
    "tibble",
    "tribble",
    "as_tibble",
    "check_rectangular",
    "type_abbr",
    "glimpse",
    "column_summary",
    # verbs
    "GroupedFrame",
    "Desc",
    "desc",
    "n",
    "n_distinct",
    "select",
    "filter_rows",
    "mutate",
    "rename",
    "arrange",
    "distinct",
    "slice_head",
    "slice_tail",
    "slice_max",
    "slice_min",
    "group_by",
    "ungroup",
    "summarize",
    "count",
    "left_join",
    "inner_join",
    "full_join",
    "semi_join",
    "anti_join",
    "pipe",
    "verb",
    # reshape
    "pivot_longer",
    "pivot_wider",
    "separate",
    "unite",
    "drop_na",
    "fill",
    "replace_na",
    "complete",
]
