"""
tidytour.report — literate documents: parse, execute, render.

## Responsibilities
- Parse R Markdown style documents (front matter, prose, ``{python}`` chunks).
- Run chunks in a shared namespace, capturing printed output and visible results.
- Render executed documents to standalone HTML or knitr-style Markdown.

## Public API
- document — ChunkOptions, ProseBlock, CodeChunk, Document (pydantic models).
- parser — parse_document, read_document, parse_chunk_header.
- executor — execute_document, execute_chunk, ExecutedDocument, ExecutedChunk, ChunkOutput.
- render — render_html, render_markdown, render_document.

## Examples
```python
from tidytour.lessons import lesson_path
from tidytour.report import render_document

render_document(lesson_path("tidy_workflow"), "out/tidy_workflow.html")  # doctest: +SKIP
```
"""

from __future__ import annotations

from .document import ChunkOptions, CodeChunk, Document, ProseBlock
from .executor import ChunkOutput, ExecutedChunk, ExecutedDocument, execute_chunk, execute_document
from .parser import parse_chunk_header, parse_document, read_document
from .render import render_document, render_html, render_markdown

__all__ = [
    "ChunkOptions",
    "CodeChunk",
    "Document",
    "ProseBlock",
    "ChunkOutput",
    "ExecutedChunk",
    "ExecutedDocument",
    "execute_chunk",
    "execute_document",
    "parse_chunk_header",
    "parse_document",
    "read_document",
    "render_document",
    "render_html",
    "render_markdown",
]
