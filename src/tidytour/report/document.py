"""
Pydantic v2 models for literate documents.

A Document is an ordered list of prose blocks and executable code chunks, plus
the metadata from its YAML front matter. Models are pure data; parsing lives in
tidytour.report.parser and execution in tidytour.report.executor.

Style
- Google-style docstrings with Attributes and Examples.
- ``extra="forbid"`` everywhere, so an unknown chunk option is a validation error.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["ChunkOptions", "ProseBlock", "CodeChunk", "Block", "Document"]


class ChunkOptions(BaseModel):
    """
    Per-chunk options written in the chunk header.

    Attributes:
        label (str | None): Chunk name; unlabelled chunks get ``unnamed-chunk-N``.
        echo (bool): Show the source code.
        eval (bool): Run the code.
        include (bool): Show anything at all (source and outputs).
        error (bool): Record an exception as output and keep going.
        results (Literal["markup","hide"]): ``"hide"`` drops printed and text/table results.
        fig_width (float | None): Chart width in inches (72 px per inch).
        fig_height (float | None): Chart height in inches.

    Examples:
        >>> ChunkOptions(label="setup", echo=False).include
        True
    """

    model_config = ConfigDict(extra="forbid")

    label: str | None = None
    echo: bool = True
    eval: bool = True
    include: bool = True
    error: bool = False
    results: Literal["markup", "hide"] = "markup"
    fig_width: float | None = Field(default=None, gt=0)
    fig_height: float | None = Field(default=None, gt=0)

    @field_validator("label", mode="before")
    @classmethod
    def _clean_label(cls, v: Any) -> Any:
        if v is None:
            return v
        s = str(v).strip()
        return s or None


class ProseBlock(BaseModel):
    """Markdown text between chunks. ``line`` is the 1-based first line in the source."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["prose"] = "prose"
    text: str
    line: int = 1


class CodeChunk(BaseModel):
    """
    An executable code chunk.

    Attributes:
        source (str): Code between the fences, without the fence lines.
        options (ChunkOptions): Parsed header options (label always set after parsing).
        line (int): 1-based line of the opening fence.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Literal["code"] = "code"
    source: str
    options: ChunkOptions = Field(default_factory=ChunkOptions)
    line: int = 1

    @property
    def label(self) -> str:
        return self.options.label or ""


Block = Annotated[ProseBlock | CodeChunk, Field(discriminator="kind")]


class Document(BaseModel):
    """
    A parsed literate document.

    Attributes:
        metadata (dict[str, Any]): YAML front matter (title, author, date, output, ...).
        blocks (list[Block]): Prose and code, in document order.
        source_path (str | None): File the document was read from, if any.

    Examples:
        >>> doc = Document(blocks=[ProseBlock(text="# Hi"), CodeChunk(source="1 + 1")])
        >>> len(doc.chunks)
        1
    """

    model_config = ConfigDict(extra="forbid")

    metadata: dict[str, Any] = Field(default_factory=dict)
    blocks: list[Block] = Field(default_factory=list)
    source_path: str | None = None

    @property
    def chunks(self) -> list[CodeChunk]:
        return [b for b in self.blocks if isinstance(b, CodeChunk)]

    @property
    def title(self) -> str | None:
        title = self.metadata.get("title")
        return None if title is None else str(title)

    def chunk(self, label: str) -> CodeChunk:
        """Return the chunk with ``label``; KeyError when absent."""
        for c in self.chunks:
            if c.label == label:
                return c
        raise KeyError(f"no chunk labelled {label!r}")
