from __future__ import annotations

from app.data import _run_lesson_impl, lesson_items
from tidytour.config import TourSettings
from tidytour.report import execute_document, parse_document


def test_lesson_items_keep_visible_parts_only() -> None:
    text = (
        "# Title\n\n"
        "```{python hidden, include=false}\nx = 3\n```\n\n"
        "```{python quiet, echo=false}\nx + 1\n```\n\n"
        "```{python boom, error=true}\nx / 0\n```\n"
    )
    executed = execute_document(parse_document(text), settings=TourSettings())

    items = lesson_items(executed)

    assert items[0] == {"kind": "prose", "text": "# Title"}
    assert items[1] == {"kind": "chunk", "label": "hidden", "source": None, "outputs": []}
    assert items[2]["source"] is None
    assert items[2]["outputs"] == [{"kind": "text", "text": "4", "data": None}]
    assert items[3]["source"] == "x / 0"
    assert items[3]["outputs"][0]["kind"] == "error"


def test_run_lesson_impl_flattens_bundled_lesson() -> None:
    items = _run_lesson_impl("tidy_workflow", theme="gray")

    chunks = {i["label"]: i for i in items if i["kind"] == "chunk"}
    assert chunks["setup"]["source"] is None
    scatter = chunks["scatter"]["outputs"][0]
    assert scatter["kind"] == "chart"
    assert scatter["data"]["config"]["view"]["fill"] == "#EBEBEB"
    assert not any(o["kind"] == "error" for i in chunks.values() for o in i["outputs"])
