from __future__ import annotations

import json
from pathlib import Path

import pytest

from tidytour.config import TourSettings
from tidytour.report import execute_document, parse_document, render_document, render_html, render_markdown

DOC = """---
title: Small report
author: Ada
date: 2024-01-02
---
# Hello

Some *text*.

```{python setup, include=false}
import polars as pl
from tidytour.viz import aes, geom_point, ggplot
df = pl.DataFrame({"x": [1, 2, 3, 4, 5], "y": [2, 4, 6, 8, 10]})
```

```{python table}
df
```

```{python chart}
ggplot(df, aes("x", "y")) + geom_point()
```

```{python compare}
print(df.height < 10)
```
"""


@pytest.fixture
def settings(tmp_path: Path) -> TourSettings:
    return TourSettings(output_dir=str(tmp_path / "out"), max_rows=3)


@pytest.fixture
def executed(settings: TourSettings):
    return execute_document(parse_document(DOC), settings=settings)


def test_html_page_structure(executed, settings: TourSettings) -> None:
    html = render_html(executed, settings)

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Small report</title>" in html
    assert "Ada · 2024-01-02" in html
    assert "<h1>Hello</h1>" in html
    assert "<em>text</em>" in html
    assert f"{settings.vega_cdn}/vega-lite@5" in html


def test_html_hides_included_false_chunk_and_escapes_source(executed, settings: TourSettings) -> None:
    html = render_html(executed, settings)

    assert "import polars as pl" not in html
    assert 'id="chunk-setup"' in html
    assert "print(df.height &lt; 10)" in html
    assert "True" in html


def test_html_tables_are_truncated(executed, settings: TourSettings) -> None:
    html = render_html(executed, settings)

    assert "# A tibble: 5 x 2" in html
    assert "<table" in html
    assert "# … with 2 more rows" in html


def test_html_embeds_chart_spec(executed, settings: TourSettings) -> None:
    html = render_html(executed, settings)

    assert 'vegaEmbed("#vis-chart-1"' in html
    assert '<div class="chart" id="vis-chart-1"></div>' in html
    assert '"point"' in html


def test_html_ids_stay_unique_when_labels_share_a_slug(settings: TourSettings) -> None:
    # Arrange: "a b" and "a-b" both reduce to the slug "a-b"
    src = (
        "```{python setup, include=false}\n"
        "import polars as pl\n"
        "from tidytour.viz import aes, geom_point, ggplot\n"
        "df = pl.DataFrame({'x': [1, 2], 'y': [3, 4]})\n"
        "```\n\n"
        "```{python a b}\nggplot(df, aes('x', 'y')) + geom_point()\n```\n\n"
        "```{python a-b}\nggplot(df, aes('y', 'x')) + geom_point()\n```\n"
    )

    # Act
    html = render_html(execute_document(parse_document(src), settings=settings), settings)

    # Assert
    assert 'id="chunk-a-b"' in html
    assert 'id="chunk-a-b-2"' in html
    assert '<div class="chart" id="vis-a-b-1"></div>' in html
    assert '<div class="chart" id="vis-a-b-2-1"></div>' in html
    assert 'vegaEmbed("#vis-a-b-1"' in html
    assert 'vegaEmbed("#vis-a-b-2-1"' in html


def test_html_error_output(settings: TourSettings) -> None:
    doc = parse_document("```{python oops, error=true}\n{}['k']\n```\n")

    html = render_html(execute_document(doc, settings=settings), settings)

    assert '<pre class="error">KeyError: &#39;k&#39;</pre>' in html


def test_markdown_document(executed, settings: TourSettings) -> None:
    md = render_markdown(executed, settings)

    assert md.startswith("# Small report\n\n*Ada · 2024-01-02*\n\n# Hello")
    assert "```python\ndf\n```" in md
    assert "## # A tibble: 5 x 2" in md
    assert "## # … with 2 more rows" in md
    assert "## True" in md
    assert "import polars" not in md


def test_markdown_chart_block_is_vega_lite_json(executed, settings: TourSettings) -> None:
    md = render_markdown(executed, settings)

    start = md.index("```vega-lite\n") + len("```vega-lite\n")
    end = md.index("\n```", start)
    spec = json.loads(md[start:end])
    assert spec["mark"]["type"] == "point"
    assert spec["encoding"]["x"]["field"] == "x"


def test_markdown_error_prefix(settings: TourSettings) -> None:
    doc = parse_document("```{python oops, error=true}\nraise ValueError('bad input')\n```\n")

    md = render_markdown(execute_document(doc, settings=settings), settings)

    assert "## Error: ValueError: bad input" in md


def test_render_document_defaults_to_output_dir(tmp_path: Path, settings: TourSettings) -> None:
    src = tmp_path / "report.md"
    src.write_text(DOC, encoding="utf-8")

    out = render_document(src, settings=settings)

    assert out == Path(settings.output_dir) / "report.html"
    assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_render_document_format_from_suffix_and_flag(tmp_path: Path, settings: TourSettings) -> None:
    src = tmp_path / "report.md"
    src.write_text(DOC, encoding="utf-8")

    md_out = render_document(src, tmp_path / "built" / "report.md", settings=settings)
    forced = render_document(src, tmp_path / "report.txt", fmt="md", settings=settings)

    assert md_out.read_text(encoding="utf-8").startswith("# Small report")
    assert forced.read_text(encoding="utf-8").startswith("# Small report")


def test_render_document_unknown_format(tmp_path: Path, settings: TourSettings) -> None:
    src = tmp_path / "report.md"
    src.write_text(DOC, encoding="utf-8")

    with pytest.raises(ValueError):
        render_document(src, fmt="pdf", settings=settings)
