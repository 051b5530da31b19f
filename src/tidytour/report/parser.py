"""
Parse literate documents (R Markdown style) into a Document.

Format
- Optional YAML front matter between a leading ``---`` line and the next
  ``---`` (or ``...``) line.
- Executable chunks open with a fence followed by a braced header:
  ```` ```{python label, echo=false, fig.width=6} ````
  and close with a fence of at least the same length.
- Plain fences (```` ```python ````, ``~~~``) are prose; their content is never
  executed and chunk headers inside them are ignored.

Header options
- The first bare token is the label (``label=...`` also works).
- Values: true/false (any case), numbers, quoted strings, or bare words.
- Dotted knitr names are accepted (``fig.width`` -> ``fig_width``).
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tidytour.core.errors import DocumentError

from .document import ChunkOptions, CodeChunk, Document, ProseBlock

__all__ = ["parse_document", "read_document", "parse_chunk_header"]

ENGINES = ("python", "py")

_CHUNK_OPEN = re.compile(r"^\s*(?P<fence>`{3,})\s*\{(?P<engine>[A-Za-z0-9_]+)(?P<rest>[^}]*)\}\s*$")
_PLAIN_FENCE = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})")
_FRONT_END = ("---", "...")


def _split_options(rest: str) -> list[str]:
    """Split on commas outside quotes."""
    parts: list[str] = []
    buf: list[str] = []
    quote: str | None = None
    for ch in rest:
        if quote is not None:
            buf.append(ch)
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
            buf.append(ch)
        elif ch == ",":
            parts.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    if quote is not None:
        raise DocumentError(f"unbalanced quote in chunk options: {rest.strip()!r}")
    parts.append("".join(buf).strip())
    return [p for p in parts if p]


def _coerce(raw: str) -> Any:
    s = raw.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        return s[1:-1]
    low = s.lower()
    if low in ("true", "t"):
        return True
    if low in ("false", "f"):
        return False
    for cast in (int, float):
        try:
            return cast(s)
        except ValueError:
            continue
    return s


def parse_chunk_header(rest: str) -> dict[str, Any]:
    """
    Parse the option text after the engine name into a dict.

    Args:
        rest: Header text, e.g. ``" setup, echo=false"``.

    Returns:
        dict[str, Any]: Option names (normalized to lower_snake) to coerced values.

    Raises:
        DocumentError: Unbalanced quotes, a bare token after the label, or a repeated option.

    Examples:
        >>> parse_chunk_header(" cars, echo=FALSE, fig.width=6")
        {'label': 'cars', 'echo': False, 'fig_width': 6}
    """
    out: dict[str, Any] = {}
    for i, piece in enumerate(_split_options(rest)):
        if "=" not in piece:
            if i == 0 and "label" not in out:
                out["label"] = piece
                continue
            raise DocumentError(f"unexpected bare token {piece!r} in chunk options")
        key, _, value = piece.partition("=")
        key = key.strip().replace(".", "_")
        if key in out:
            raise DocumentError(f"chunk option {key!r} given twice")
        out[key] = _coerce(value)
    return out


def _front_matter(lines: list[str]) -> tuple[dict[str, Any], int]:
    """Return (metadata, index of the first body line)."""
    if not lines or lines[0].strip() != "---":
        return {}, 0
    for end in range(1, len(lines)):
        if lines[end].strip() in _FRONT_END:
            break
    else:
        raise DocumentError("unterminated YAML front matter starting at line 1")
    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise DocumentError(f"invalid YAML front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise DocumentError("YAML front matter must be a mapping")
    return meta, end + 1


def _closes(line: str, fence: str) -> bool:
    s = line.strip()
    return len(s) >= len(fence) and set(s) == {fence[0]}


def parse_document(text: str, *, source_path: str | None = None) -> Document:
    """
    Parse document text into a Document.

    Args:
        text: Document source.
        source_path: Recorded on the result for messages and rendering.

    Returns:
        Document: Front matter, prose blocks and labelled code chunks.

    Raises:
        DocumentError: Malformed front matter, an unterminated chunk (naming its
            line), an unsupported engine, invalid options or duplicate labels.

    Examples:
        >>> doc = parse_document("# Intro\\n\\n```{python}\\n1 + 1\\n```\\n")
        >>> doc.chunks[0].label
        'unnamed-chunk-1'
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    metadata, start = _front_matter(lines)

    blocks: list[ProseBlock | CodeChunk] = []
    prose: list[str] = []
    prose_line = start + 1
    labels: set[str] = set()
    n_chunks = 0
    plain_fence: str | None = None

    def flush_prose() -> None:
        body = "\n".join(prose).strip("\n")
        if body.strip():
            blocks.append(ProseBlock(text=body, line=prose_line))
        prose.clear()

    i = start
    while i < len(lines):
        line = lines[i]
        if plain_fence is not None:
            prose.append(line)
            if _closes(line, plain_fence):
                plain_fence = None
            i += 1
            continue

        m = _CHUNK_OPEN.match(line)
        if m is None:
            plain = _PLAIN_FENCE.match(line)
            if plain is not None:
                plain_fence = plain.group("fence")
            if not prose:
                prose_line = i + 1
            prose.append(line)
            i += 1
            continue

        lineno = i + 1
        engine = m.group("engine").lower()
        if engine not in ENGINES:
            raise DocumentError(f"line {lineno}: unsupported chunk engine {engine!r}; use {{python}}")
        fence = m.group("fence")
        body: list[str] = []
        i += 1
        while i < len(lines) and not _closes(lines[i], fence):
            body.append(lines[i])
            i += 1
        if i >= len(lines):
            raise DocumentError(f"line {lineno}: unterminated code chunk")
        i += 1

        flush_prose()
        n_chunks += 1
        try:
            raw = parse_chunk_header(m.group("rest"))
        except DocumentError as exc:
            raise DocumentError(f"line {lineno}: {exc}") from exc
        raw.setdefault("label", None)
        try:
            options = ChunkOptions(**raw)
        except ValidationError as exc:
            raise DocumentError(f"line {lineno}: invalid chunk options: {exc}") from exc
        if options.label is None:
            options = options.model_copy(update={"label": f"unnamed-chunk-{n_chunks}"})
        if options.label in labels:
            raise DocumentError(f"line {lineno}: duplicate chunk label {options.label!r}")
        labels.add(options.label)
        blocks.append(CodeChunk(source="\n".join(body), options=options, line=lineno))
        prose_line = i + 1

    # An unclosed display fence leaves the remainder as prose, as Markdown does.
    flush_prose()
    return Document(metadata=metadata, blocks=blocks, source_path=source_path)


def read_document(path: str | os.PathLike[str]) -> Document:
    """Read and parse a document file (UTF-8)."""
    p = Path(path)
    return parse_document(p.read_text(encoding="utf-8"), source_path=str(p))
