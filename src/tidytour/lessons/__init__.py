"""
Bundled lesson documents.

Lessons are literate Markdown files shipped as package data next to this
module; ``<name>.md`` is the lesson called ``name``.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from tidytour.report.document import Document
from tidytour.report.parser import parse_document

__all__ = ["LESSON_SUFFIX", "list_lessons", "lesson_path", "read_lesson", "load_lesson"]

LESSON_SUFFIX = ".md"


def _root() -> Path:
    return Path(str(resources.files(__package__)))


def list_lessons() -> list[str]:
    """Names of the bundled lessons, sorted."""
    return sorted(p.stem for p in _root().iterdir() if p.suffix == LESSON_SUFFIX)


def lesson_path(name: str) -> Path:
    """
    Path of a bundled lesson.

    Raises:
        KeyError: Unknown lesson; the message lists the bundled ones.
    """
    path = _root() / f"{name}{LESSON_SUFFIX}"
    if not path.is_file():
        raise KeyError(f"unknown lesson {name!r}; bundled lessons: {list_lessons()}")
    return path


def read_lesson(name: str) -> str:
    return lesson_path(name).read_text(encoding="utf-8")


def load_lesson(name: str) -> Document:
    """Parse a bundled lesson into a Document."""
    path = lesson_path(name)
    return parse_document(path.read_text(encoding="utf-8"), source_path=str(path))
