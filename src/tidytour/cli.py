from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from tidytour.config import TourSettings
from tidytour.core.errors import ChunkExecutionError, DocumentError
from tidytour.core.table import glimpse
from tidytour.datasets import DATASETS, list_datasets, load_dataset
from tidytour.lessons import lesson_path, list_lessons
from tidytour.report.render import FORMATS, render_document

_VERBOSE_FLAGS = ("-v", "--verbose")


def _resolve_source(target: str) -> Path | None:
    """A document path, or the path of a bundled lesson with that name."""
    path = Path(target)
    if path.is_file():
        return path
    try:
        return lesson_path(target)
    except KeyError:
        return None


def _cmd_render(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="tidytour render", description="Render a lesson or document to HTML/Markdown.")
    p.add_argument("target", help="Document path or bundled lesson name.")
    p.add_argument("-o", "--out", type=str, default="", help="Output file (default: <output_dir>/<name>.<ext>).")
    p.add_argument("--format", dest="fmt", choices=sorted(FORMATS), default=None, help="Output format.")
    p.add_argument(
        "--keep-going",
        action="store_true",
        help="Record chunk errors in the report instead of stopping.",
    )
    args = p.parse_args(argv)

    source = _resolve_source(args.target)
    if source is None:
        print(
            f"[WARN] {args.target!r} is neither a file nor a bundled lesson ({', '.join(list_lessons())})",
            file=sys.stderr,
        )
        return 2

    settings = TourSettings.load()
    if args.keep_going:
        settings = replace(settings, halt_on_error=False)
    try:
        out = render_document(source, args.out or None, args.fmt, settings)
    except DocumentError as e:
        print(f"[WARN] {source}: {e}", file=sys.stderr)
        return 2
    except ChunkExecutionError as e:
        print(f"[WARN] {source}: {e}", file=sys.stderr)
        return 1
    print(f"[INFO] Wrote report to {out}")
    return 0


def _cmd_lessons(argv: list[str]) -> int:
    argparse.ArgumentParser(prog="tidytour lessons", description="List bundled lessons.").parse_args(argv)
    for name in list_lessons():
        print(name)
    return 0


def _cmd_datasets(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="tidytour datasets", description="List datasets or show one.")
    p.add_argument("name", nargs="?", default="", help="Dataset to show.")
    p.add_argument("--n", type=int, default=10, help="Rows to display.")
    args = p.parse_args(argv)

    if not args.name:
        width = max(len(name) for name in DATASETS)
        for info in list_datasets():
            tag = "tidy" if info.tidy else "untidy"
            print(f"{info.name.ljust(width)}  [{tag}]  {info.title}")
        return 0
    if args.name not in DATASETS:
        print(f"[WARN] Unknown dataset {args.name!r}; known: {', '.join(DATASETS)}", file=sys.stderr)
        return 2
    print(load_dataset(args.name).head(args.n))
    return 0


def _cmd_glimpse(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="tidytour glimpse", description="Print a dataset glimpse.")
    p.add_argument("name", help="Dataset name.")
    args = p.parse_args(argv)

    if args.name not in DATASETS:
        print(f"[WARN] Unknown dataset {args.name!r}; known: {', '.join(DATASETS)}", file=sys.stderr)
        return 2
    print(glimpse(load_dataset(args.name), width=TourSettings.load().glimpse_width))
    return 0


_COMMANDS = {
    "render": _cmd_render,
    "lessons": _cmd_lessons,
    "datasets": _cmd_datasets,
    "glimpse": _cmd_glimpse,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tidytour", description="Tidy data workflow tour: lessons, datasets, reports.")
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    sub = p.add_subparsers(dest="cmd", required=True)
    for name in _COMMANDS:
        sub.add_parser(name)
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    load_dotenv(find_dotenv(usecwd=True))
    verbose = False
    while argv and argv[0] in _VERBOSE_FLAGS:
        verbose = True
        argv = argv[1:]
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    else:
        code = handler(rest)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
