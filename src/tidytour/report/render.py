"""
Render executed documents to HTML or Markdown.

- render_html: jinja2 template; prose through Markdown; tables through polars'
  HTML repr (first ``max_rows`` rows); charts embedded as Vega-Lite specs and
  drawn by vega-embed loaded from ``settings.vega_cdn``.
- render_markdown: knitr-style Markdown; text outputs prefixed with ``## ``,
  charts as fenced ``vega-lite`` JSON blocks.
- render_document: parse + execute + render + write, returning the output path.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import markdown
import polars as pl
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from tidytour.config import TourSettings

from .executor import ChunkOutput, ExecutedChunk, ExecutedDocument, execute_document
from .parser import read_document

__all__ = ["render_html", "render_markdown", "render_document", "FORMATS"]

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

FORMATS = {"html": ".html", "md": ".md"}

_MD_EXTENSIONS = ["fenced_code", "tables"]


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _truncate(df: pl.DataFrame, max_rows: int) -> tuple[pl.DataFrame, str]:
    extra = df.height - max_rows
    if extra <= 0:
        return df, ""
    return df.head(max_rows), f"# … with {extra} more row{'s' if extra != 1 else ''}"


def _meta(executed: ExecutedDocument) -> dict[str, Any]:
    meta = executed.document.metadata
    return {k: (None if meta.get(k) is None else str(meta.get(k))) for k in ("title", "author", "date")}


# ----------------------------
# HTML
# ----------------------------


def _html_output(out: ChunkOutput, chart_id: str, settings: TourSettings) -> dict[str, Any]:
    if out.kind == "table":
        head, note = _truncate(out.data, settings.max_rows)
        return {"kind": "table", "text": out.text, "html": Markup(head._repr_html_()), "note": note}
    if out.kind == "chart":
        spec = json.dumps(out.data).replace("</", "<\\/")
        return {"kind": "chart", "id": chart_id, "spec": Markup(spec)}
    return {"kind": out.kind, "text": out.text.rstrip("\n")}


def _unique_slug(label: str, seen: set[str]) -> str:
    base = re.sub(r"[^A-Za-z0-9_-]+", "-", label)
    slug, n = base, 1
    while slug in seen:
        n += 1
        slug = f"{base}-{n}"
    seen.add(slug)
    return slug


def _html_chunk(chunk: ExecutedChunk, settings: TourSettings, slug: str) -> dict[str, Any]:
    outputs = [
        _html_output(out, f"vis-{slug}-{n}", settings) for n, out in enumerate(chunk.visible_outputs(), start=1)
    ]
    return {
        "kind": "chunk",
        "label": slug,
        "source": chunk.chunk.source if chunk.show_source else None,
        "outputs": outputs,
    }


def render_html(executed: ExecutedDocument, settings: TourSettings | None = None) -> str:
    """
    Render an executed document as a standalone HTML page.

    Args:
        executed: Result of execute_document().
        settings: Uses ``max_rows`` and ``vega_cdn``; loaded when None.

    Returns:
        str: HTML text.
    """
    settings = settings or TourSettings.load()
    items: list[dict[str, Any]] = []
    seen: set[str] = set()
    for item in executed:
        if isinstance(item, ExecutedChunk):
            items.append(_html_chunk(item, settings, _unique_slug(item.label, seen)))
        else:
            items.append({"kind": "prose", "html": Markup(markdown.markdown(item.text, extensions=_MD_EXTENSIONS))})
    template = _environment().get_template("report.html.j2")
    return template.render(items=items, cdn=settings.vega_cdn, **_meta(executed))


# ----------------------------
# Markdown
# ----------------------------


def _comment(text: str) -> str:
    return "\n".join(f"## {line}" for line in text.rstrip("\n").split("\n"))


def _md_output(out: ChunkOutput, settings: TourSettings) -> str:
    if out.kind == "chart":
        return "```vega-lite\n" + json.dumps(out.data, indent=2) + "\n```"
    if out.kind == "table":
        head, note = _truncate(out.data, settings.max_rows)
        body = "\n".join(filter(None, [out.text, str(head), note]))
        return "```\n" + _comment(body) + "\n```"
    if out.kind == "error":
        return "```\n" + _comment(f"Error: {out.text}") + "\n```"
    return "```\n" + _comment(out.text) + "\n```"


def render_markdown(executed: ExecutedDocument, settings: TourSettings | None = None) -> str:
    """Render an executed document as Markdown (knitr ``md_document`` style)."""
    settings = settings or TourSettings.load()
    parts: list[str] = []
    meta = _meta(executed)
    if meta["title"]:
        parts.append(f"# {meta['title']}")
    byline = " · ".join(v for v in (meta["author"], meta["date"]) if v)
    if byline:
        parts.append(f"*{byline}*")
    for item in executed:
        if not isinstance(item, ExecutedChunk):
            parts.append(item.text)
            continue
        if item.show_source:
            parts.append("```python\n" + item.chunk.source + "\n```")
        parts.extend(_md_output(out, settings) for out in item.visible_outputs())
    return "\n\n".join(parts) + "\n"


# ----------------------------
# Files
# ----------------------------


def _resolve_format(out_path: Path | None, fmt: str | None, settings: TourSettings) -> str:
    if fmt is None and out_path is not None:
        by_suffix = {v: k for k, v in FORMATS.items()}
        fmt = by_suffix.get(out_path.suffix.lower())
    fmt = fmt or settings.output_format
    if fmt not in FORMATS:
        raise ValueError(f"unknown output format {fmt!r}; expected one of {sorted(FORMATS)}")
    return fmt


def render_document(
    path: str | os.PathLike[str],
    out_path: str | os.PathLike[str] | None = None,
    fmt: str | None = None,
    settings: TourSettings | None = None,
) -> Path:
    """
    Parse, execute and render a document file, writing the report.

    Args:
        path: Source document (.md / .Rmd-style text).
        out_path: Destination; defaults to ``<output_dir>/<stem>.<ext>``.
        fmt: "html" or "md"; inferred from ``out_path``'s suffix, then settings.
        settings: Runtime settings; ``TourSettings.load()`` when None.

    Returns:
        Path: The written report.

    Raises:
        DocumentError: The document cannot be parsed.
        ChunkExecutionError: A chunk failed and errors are not captured.
        ValueError: Unknown format.
    """
    settings = settings or TourSettings.load()
    src = Path(path)
    dest = None if out_path is None else Path(out_path)
    fmt = _resolve_format(dest, fmt, settings)
    if dest is None:
        dest = Path(settings.output_dir) / f"{src.stem}{FORMATS[fmt]}"

    executed = execute_document(read_document(src), settings=settings)
    text = render_html(executed, settings) if fmt == "html" else render_markdown(executed, settings)

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(text, encoding="utf-8")
    logger.info("rendered %s -> %s", src, dest)
    return dest
