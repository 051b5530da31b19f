"""
Exception types raised by tidytour itself.

Library failures (polars, altair) are never wrapped; they propagate with the
library's own type and message. The types below cover only structural checks
the libraries cannot express on our behalf.

Notes:
    - Value-like failures subclass ValueError so callers catching ValueError keep working.
    - ChunkExecutionError chains the original exception (``raise ... from exc``).

Examples:
    >>> from tidytour.core.errors import TableError
    >>> try:
    ...     raise TableError("columns must have compatible lengths")
    ... except ValueError as e:
    ...     msg = str(e)
    >>> "compatible" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "TidyError",
    "TableError",
    "ReshapeError",
    "PlotSpecError",
    "DocumentError",
    "ChunkExecutionError",
]


class TidyError(Exception):
    """Base class for errors raised by tidytour."""


class TableError(TidyError, ValueError):
    """Rectangular-table invariant violation (duplicate names, incompatible lengths)."""


class ReshapeError(TidyError, ValueError):
    """A pivot or separate request that cannot be represented as a rectangular table."""


class PlotSpecError(TidyError, ValueError):
    """Aesthetic mapping or layer composition problem detected while building a chart."""


class DocumentError(TidyError, ValueError):
    """Malformed literate document (bad fence, bad chunk options, duplicate labels)."""


class ChunkExecutionError(TidyError, RuntimeError):
    """
    A code chunk raised while executing a document.

    Attributes:
        label (str): Label of the failing chunk.
        cause (BaseException): The original exception raised by the chunk.
    """

    def __init__(self, label: str, cause: BaseException) -> None:
        self.label = label
        self.cause = cause
        super().__init__(f"chunk {label!r} failed: {type(cause).__name__}: {cause}")
