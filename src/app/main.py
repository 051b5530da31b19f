"""
tidytour App entrypoint.

This module provides the CLI entrypoint to launch the Streamlit lesson viewer.
It defers all UI composition to the app.ui package and exists solely to start
Streamlit programmatically or render directly when already running under
Streamlit.

Usage:
    - Python execution (hands process to Streamlit):
        python -m app.main --lesson tidy_workflow --dataset mtcars

    - Streamlit direct:
        streamlit run src/app/main.py -- --lesson tidy_workflow
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from app.ui import streamlit_app


def _parser(*, add_help: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="tidytour Streamlit App", add_help=add_help)
    parser.add_argument("--lesson", default=None, help="Bundled lesson shown first.")
    parser.add_argument("--dataset", default=None, help="Dataset preselected in the explorer.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that launches Streamlit with the tidytour UI.

    If already executing within a Streamlit server (environment variable
    STREAMLIT_SERVER_PORT is set), this function renders the app directly.
    Otherwise, it execs "python -m streamlit run <this_module>" to leverage
    Streamlit's reloader, passing any supported options after "--".

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.

    Examples:
        python -m app.main --lesson tidy_workflow
        streamlit run src/app/main.py -- --dataset table1
    """
    args = list(sys.argv[1:] if argv is None else argv)
    load_dotenv(find_dotenv(usecwd=True))
    ns = _parser().parse_args(args)

    if os.environ.get("STREAMLIT_SERVER_PORT"):
        streamlit_app(default_lesson=ns.lesson, default_dataset=ns.dataset)
        return

    app_path = Path(__file__).resolve()
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path)]

    passthrough: list[str] = []
    if ns.lesson:
        passthrough += ["--lesson", ns.lesson]
    if ns.dataset:
        passthrough += ["--dataset", ns.dataset]
    if passthrough:
        cmd += ["--"] + passthrough

    os.execv(sys.executable, cmd)


if __name__ == "__main__":
    # `streamlit run` passes our options after '--'
    known, _ = _parser(add_help=False).parse_known_args(sys.argv[1:])
    streamlit_app(default_lesson=known.lesson, default_dataset=known.dataset)
