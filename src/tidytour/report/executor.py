"""
Execute the code chunks of a Document.

Semantics (knitr / notebook style)
- Chunks run top to bottom in one shared namespace.
- stdout is captured per chunk.
- A trailing expression statement is the chunk's visible result:
  polars tables (and grouped tables, series) -> table output;
  tidytour Plots and Altair charts -> chart output (Vega-Lite dict);
  None -> nothing; anything else -> ``repr`` text.
- ``eval=false`` chunks are kept (for display) but never run.
- Exceptions: with ``error=true`` (or ``halt_on_error=False`` in settings) the
  final traceback line is recorded as an error output and execution continues;
  otherwise ChunkExecutionError is raised, chained to the original exception.
"""

from __future__ import annotations

import ast
import contextlib
import io
import logging
import time
import traceback
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

import altair as alt
import polars as pl

from tidytour.config import TourSettings
from tidytour.core.errors import ChunkExecutionError
from tidytour.core.verbs import GroupedFrame
from tidytour.viz.plot import Plot

from .document import CodeChunk, Document, ProseBlock

__all__ = [
    "ChunkOutput",
    "ExecutedChunk",
    "ExecutedDocument",
    "execute_chunk",
    "execute_document",
    "PX_PER_INCH",
]

logger = logging.getLogger(__name__)

OutputKind = Literal["stdout", "table", "chart", "text", "error"]

PX_PER_INCH = 72

_HIDDEN_BY_RESULTS = ("stdout", "table", "text")


@dataclass(frozen=True)
class ChunkOutput:
    """
    One piece of chunk output.

    Attributes:
        kind: "stdout", "table", "chart", "text" or "error".
        text: Printed text, repr, table header or error line.
        data: ``pl.DataFrame`` for tables, Vega-Lite dict for charts, else None.
    """

    kind: OutputKind
    text: str = ""
    data: Any = None


@dataclass
class ExecutedChunk:
    chunk: CodeChunk
    outputs: list[ChunkOutput] = field(default_factory=list)
    seconds: float = 0.0

    @property
    def label(self) -> str:
        return self.chunk.label

    @property
    def failed(self) -> bool:
        return any(o.kind == "error" for o in self.outputs)

    @property
    def show_source(self) -> bool:
        opts = self.chunk.options
        return opts.include and opts.echo

    def visible_outputs(self) -> list[ChunkOutput]:
        """Outputs to render after applying ``include`` and ``results``."""
        opts = self.chunk.options
        if not opts.include:
            return []
        if opts.results == "hide":
            return [o for o in self.outputs if o.kind not in _HIDDEN_BY_RESULTS]
        return list(self.outputs)


@dataclass
class ExecutedDocument:
    """A Document plus the results of running its chunks, in document order."""

    document: Document
    items: list[ProseBlock | ExecutedChunk] = field(default_factory=list)
    namespace: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def chunks(self) -> list[ExecutedChunk]:
        return [i for i in self.items if isinstance(i, ExecutedChunk)]

    @property
    def errors(self) -> list[tuple[str, str]]:
        return [(c.label, o.text) for c in self.chunks for o in c.outputs if o.kind == "error"]

    def __iter__(self) -> Iterator[ProseBlock | ExecutedChunk]:
        return iter(self.items)


# ----------------------------
# Value classification
# ----------------------------


def _chart_size(chunk: CodeChunk, settings: TourSettings) -> tuple[int, int]:
    opts = chunk.options
    width = round(opts.fig_width * PX_PER_INCH) if opts.fig_width else settings.chart_width
    height = round(opts.fig_height * PX_PER_INCH) if opts.fig_height else settings.chart_height
    return width, height


def _classify(value: Any, chunk: CodeChunk, settings: TourSettings) -> ChunkOutput | None:
    if value is None:
        return None
    if isinstance(value, pl.DataFrame):
        return ChunkOutput("table", text=f"# A tibble: {value.height} x {value.width}", data=value)
    if isinstance(value, GroupedFrame):
        return ChunkOutput("table", text=repr(value).splitlines()[0], data=value.frame)
    if isinstance(value, pl.Series):
        return ChunkOutput("table", text=f"# A series: {value.name} ({value.len()})", data=value.to_frame())
    if isinstance(value, Plot):
        width, height = _chart_size(chunk, settings)
        chart = value.to_altair(width=width, height=height, theme=settings.theme)
        return ChunkOutput("chart", data=chart.to_dict())
    if isinstance(value, alt.TopLevelMixin):
        return ChunkOutput("chart", data=value.to_dict())
    return ChunkOutput("text", text=repr(value))


def _split_tail(tree: ast.Module) -> ast.Expression | None:
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        tail = tree.body.pop()
        return ast.Expression(body=tail.value)
    return None


def _error_line(exc: BaseException) -> str:
    return traceback.format_exception_only(type(exc), exc)[-1].strip()


# ----------------------------
# Execution
# ----------------------------


def execute_chunk(
    chunk: CodeChunk,
    namespace: dict[str, Any],
    settings: TourSettings | None = None,
) -> ExecutedChunk:
    """
    Run one chunk in ``namespace``.

    Args:
        chunk: Chunk to run.
        namespace: Globals shared with the other chunks of the document.
        settings: Chart size/theme and ``halt_on_error``; loaded when None.

    Returns:
        ExecutedChunk: Captured outputs (empty for ``eval=false``).

    Raises:
        ChunkExecutionError: The chunk raised and neither ``error=true`` nor
            ``halt_on_error=False`` applies.
    """
    settings = settings or TourSettings.load()
    done = ExecutedChunk(chunk=chunk)
    if not chunk.options.eval:
        logger.debug("chunk %s: eval=false, skipped", chunk.label)
        return done

    filename = f"<chunk {chunk.label}>"
    buf = io.StringIO()
    started = time.perf_counter()
    logger.debug("chunk %s: start (line %d)", chunk.label, chunk.line)
    try:
        with contextlib.redirect_stdout(buf):
            tree = ast.parse(chunk.source, filename=filename, mode="exec")
            tail = _split_tail(tree)
            exec(compile(tree, filename, "exec"), namespace)
            value = eval(compile(tail, filename, "eval"), namespace) if tail is not None else None
        result = _classify(value, chunk, settings)
    except Exception as exc:
        done.seconds = time.perf_counter() - started
        if buf.getvalue():
            done.outputs.append(ChunkOutput("stdout", text=buf.getvalue()))
        if not (chunk.options.error or not settings.halt_on_error):
            raise ChunkExecutionError(chunk.label, exc) from exc
        line = _error_line(exc)
        logger.warning("chunk %s (line %d) raised: %s", chunk.label, chunk.line, line)
        done.outputs.append(ChunkOutput("error", text=line))
        return done

    done.seconds = time.perf_counter() - started
    if buf.getvalue():
        done.outputs.append(ChunkOutput("stdout", text=buf.getvalue()))
    if result is not None:
        done.outputs.append(result)
    logger.debug("chunk %s: done in %.3fs", chunk.label, done.seconds)
    return done


def execute_document(
    document: Document,
    namespace: dict[str, Any] | None = None,
    settings: TourSettings | None = None,
) -> ExecutedDocument:
    """
    Run every chunk of ``document`` in order in a shared namespace.

    Args:
        document: Parsed document.
        namespace: Starting globals (a fresh module-like dict when None).
        settings: Runtime settings; ``TourSettings.load()`` when None.

    Returns:
        ExecutedDocument: Prose and executed chunks in document order, plus the
        final namespace.

    Raises:
        ChunkExecutionError: First failing chunk when errors are not captured.

    Examples:
        >>> from tidytour.report.parser import parse_document
        >>> done = execute_document(parse_document("```{python}\\nx = 2\\nx * 21\\n```"))
        >>> done.chunks[0].outputs[0].text
        '42'
    """
    settings = settings or TourSettings.load()
    ns: dict[str, Any] = {"__name__": "__tidytour__"} if namespace is None else namespace
    out = ExecutedDocument(document=document, namespace=ns)
    logger.info("executing %d chunk(s) from %s", len(document.chunks), document.source_path or "<text>")
    for block in document.blocks:
        if isinstance(block, ProseBlock):
            out.items.append(block)
        else:
            out.items.append(execute_chunk(block, ns, settings))
    return out
