from __future__ import annotations

import os
from pathlib import Path

import pytest

from app import main as app_main


def test_main_renders_inline(monkeypatch) -> None:
    called = {}

    def fake_streamlit_app(*, default_lesson=None, default_dataset=None):
        called["default_lesson"] = default_lesson
        called["default_dataset"] = default_dataset

    monkeypatch.setenv("STREAMLIT_SERVER_PORT", "1")
    # Patch the imported symbol used inside app.main (not the package attribute)
    monkeypatch.setattr(app_main, "streamlit_app", fake_streamlit_app, raising=True)

    app_main.main(["--lesson", "tidy_workflow"])

    assert called["default_lesson"] == "tidy_workflow"
    assert called["default_dataset"] is None


def test_main_execs_streamlit(monkeypatch) -> None:
    # Ensure not in Streamlit context
    monkeypatch.delenv("STREAMLIT_SERVER_PORT", raising=False)

    captured = {}

    def fake_execv(exe: str, cmd: list[str]) -> None:
        captured["exe"] = exe
        captured["cmd"] = cmd
        # Prevent process handoff
        raise SystemExit

    monkeypatch.setattr(os, "execv", fake_execv, raising=True)

    with pytest.raises(SystemExit):
        app_main.main(["--lesson", "tidy_workflow", "--dataset", "table1"])

    assert captured["cmd"][0] == captured["exe"]
    # Assert we launch `python -m streamlit run <path>`
    assert captured["cmd"][1:4] == ["-m", "streamlit", "run"]
    expected_main_path = str(Path(app_main.__file__).resolve())
    assert captured["cmd"][4] == expected_main_path
    # Passthrough args present after `--`
    dashdash_idx = captured["cmd"].index("--")
    passthrough = captured["cmd"][dashdash_idx + 1 :]
    assert passthrough == ["--lesson", "tidy_workflow", "--dataset", "table1"]


def test_main_without_options_has_no_passthrough(monkeypatch) -> None:
    monkeypatch.delenv("STREAMLIT_SERVER_PORT", raising=False)
    captured = {}

    def fake_execv(exe: str, cmd: list[str]) -> None:
        captured["cmd"] = cmd
        raise SystemExit

    monkeypatch.setattr(os, "execv", fake_execv, raising=True)

    with pytest.raises(SystemExit):
        app_main.main([])

    assert "--" not in captured["cmd"]
