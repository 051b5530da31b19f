from __future__ import annotations

import pytest

from tidytour.config import TourSettings
from tidytour.lessons import lesson_path, list_lessons, load_lesson, read_lesson
from tidytour.report import execute_document, render_html


def test_bundled_lessons() -> None:
    assert "tidy_workflow" in list_lessons()
    assert lesson_path("tidy_workflow").name == "tidy_workflow.md"
    assert read_lesson("tidy_workflow").startswith("---")


def test_unknown_lesson() -> None:
    with pytest.raises(KeyError) as ei:
        lesson_path("nope")
    assert "tidy_workflow" in str(ei.value)


def test_tidy_workflow_runs_end_to_end() -> None:
    doc = load_lesson("tidy_workflow")
    assert doc.title == "A tour of the tidy workflow"

    done = execute_document(doc, settings=TourSettings())

    assert done.errors == []
    kinds = {c.label: [o.kind for o in c.outputs] for c in done.chunks}
    assert kinds["setup"] == []
    assert kinds["count"] == ["table"]
    assert kinds["glimpse"] == ["stdout"]
    charts = [label for label, ks in kinds.items() if "chart" in ks]
    assert len(charts) >= 9
    assert "facets" in charts


def test_tidy_workflow_reshape_results() -> None:
    done = execute_document(load_lesson("tidy_workflow"), settings=TourSettings())

    longer = done.chunks[[c.label for c in done.chunks].index("pivot-longer")].outputs[-1].data
    assert longer.height == 6
    facets = done.chunks[[c.label for c in done.chunks].index("facets")].outputs[0].data
    assert facets["columns"] == 2


def test_tidy_workflow_html(tmp_path) -> None:
    settings = TourSettings(output_dir=str(tmp_path))
    html = render_html(execute_document(load_lesson("tidy_workflow"), settings=settings), settings)

    assert "A tour of the tidy workflow" in html
    assert html.count("vegaEmbed(") >= 9
