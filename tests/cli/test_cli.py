from __future__ import annotations

from pathlib import Path

import pytest

from tidytour.cli import main


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # No tidytour.toml / pyproject.toml from the working tree, no env overrides.
    monkeypatch.chdir(tmp_path)
    for key in ("TIDYTOUR_OUTPUT_DIR", "TIDYTOUR_OUTPUT_FORMAT", "TIDYTOUR_HALT_ON_ERROR", "TIDYTOUR_MAX_ROWS"):
        monkeypatch.delenv(key, raising=False)


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as ei:
        main(argv)
    return ei.value.code


def test_render_bundled_lesson(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "lesson.html"

    code = _exit_code(["render", "tidy_workflow", "-o", str(out)])

    assert code == 0
    assert out.exists()
    assert "vegaEmbed(" in out.read_text(encoding="utf-8")
    assert f"[INFO] Wrote report to {out}" in capsys.readouterr().out


def test_render_file_to_default_markdown_location(tmp_path: Path) -> None:
    src = tmp_path / "notes.md"
    src.write_text("# Notes\n\n```{python}\n6 * 7\n```\n", encoding="utf-8")

    code = _exit_code(["render", str(src), "--format", "md"])

    assert code == 0
    text = (tmp_path / "out" / "notes.md").read_text(encoding="utf-8")
    assert "## 42" in text


def test_render_unknown_target(capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(["render", "no-such-thing"]) == 2
    assert "[WARN]" in capsys.readouterr().err


def test_render_malformed_document(tmp_path: Path) -> None:
    src = tmp_path / "broken.md"
    src.write_text("```{python}\nx = 1\n", encoding="utf-8")

    assert _exit_code(["render", str(src)]) == 2


def test_render_failing_chunk_and_keep_going(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "fails.md"
    src.write_text("```{python boom}\n1 / 0\n```\n", encoding="utf-8")
    out = tmp_path / "fails.md.html"

    assert _exit_code(["render", str(src), "-o", str(out)]) == 1
    assert "boom" in capsys.readouterr().err
    assert not out.exists()

    assert _exit_code(["render", str(src), "-o", str(out), "--keep-going"]) == 0
    assert "ZeroDivisionError" in out.read_text(encoding="utf-8")


def test_lessons_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(["lessons"]) == 0
    assert "tidy_workflow" in capsys.readouterr().out.splitlines()


def test_datasets_listing_and_show(capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(["datasets"]) == 0
    listing = capsys.readouterr().out
    assert "mtcars" in listing
    assert "[untidy]" in listing

    assert _exit_code(["datasets", "table1", "--n", "2"]) == 0
    assert "shape: (2, 4)" in capsys.readouterr().out

    assert _exit_code(["datasets", "nope"]) == 2


def test_glimpse_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(["-v", "glimpse", "mtcars"]) == 0
    out = capsys.readouterr().out
    assert "Rows: 32" in out
    assert "Columns: 12" in out

    assert _exit_code(["glimpse", "nope"]) == 2


def test_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(["frobnicate"]) == 2
    assert "Unknown command: frobnicate" in capsys.readouterr().err


def test_no_arguments_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    main([])
    assert "usage: tidytour" in capsys.readouterr().out


def test_dotenv_in_working_directory_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Record the variable so monkeypatch removes what .env loading sets.
    monkeypatch.setenv("TIDYTOUR_OUTPUT_FORMAT", "html")
    monkeypatch.delenv("TIDYTOUR_OUTPUT_FORMAT")
    (tmp_path / ".env").write_text("TIDYTOUR_OUTPUT_FORMAT=md\n", encoding="utf-8")
    src = tmp_path / "notes.md"
    src.write_text("```{python}\n1\n```\n", encoding="utf-8")

    assert _exit_code(["render", str(src)]) == 0
    assert (tmp_path / "out" / "notes.md").exists()
