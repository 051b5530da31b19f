"""
Configuration for tidytour rendering and display.

Defines TourSettings, a frozen dataclass carrying runtime configuration for the
report renderer, chart builder and table printing. Defaults are sourced from
tidytour.core.constants (the single source of truth).

Precedence
- environment (TIDYTOUR_*) > TOML (./tidytour.toml or [tool.tidytour] in
  ./pyproject.toml) > defaults.

Notes
- Parsing is lenient: a value that cannot be interpreted leaves the current
  setting untouched.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from tidytour.core import constants as C

logger = logging.getLogger(__name__)

OutputFormat = Literal["html", "md"]
Theme = Literal["minimal", "gray"]

_FORMATS = ("html", "md")
_THEMES = ("minimal", "gray")
_TRUE_WORDS = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"0", "false", "f", "no", "n", "off"})


@dataclass(frozen=True)
class TourSettings:
    """
    Runtime settings for tidytour.

    Attributes:
        output_dir (str): Directory for rendered reports when no explicit path is given.
        output_format (Literal["html","md"]): Default report format.
        max_rows (int): Rows printed per table in reports.
        glimpse_width (int): Character width of glimpse() output.
        chart_width (int): Default chart width in pixels.
        chart_height (int): Default chart height in pixels.
        theme (Literal["minimal","gray"]): Chart theme applied to compiled plots.
        halt_on_error (bool): Stop rendering at the first failing chunk unless the
            chunk sets ``error=true``. When False every chunk behaves as ``error=true``.
        vega_cdn (str): Base URL for vega/vega-lite/vega-embed scripts in HTML reports.

    Examples:
        >>> from tidytour.config import TourSettings
        >>> TourSettings(max_rows=5)  # doctest: +ELLIPSIS
        TourSettings(...)
    """

    output_dir: str = C.OUTPUT_DIR
    output_format: OutputFormat = C.OUTPUT_FORMAT  # type: ignore[assignment]
    max_rows: int = C.MAX_ROWS
    glimpse_width: int = C.GLIMPSE_WIDTH
    chart_width: int = C.CHART_WIDTH
    chart_height: int = C.CHART_HEIGHT
    theme: Theme = C.THEME  # type: ignore[assignment]
    halt_on_error: bool = True
    vega_cdn: str = C.VEGA_CDN

    @classmethod
    def _apply_mapping(cls, base: TourSettings, cfg: dict[str, Any] | None) -> TourSettings:
        """Apply a loose config mapping onto TourSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _bool(v: Any) -> bool | None:
            if isinstance(v, bool):
                return v
            if isinstance(v, (int, float)):
                return bool(v)
            if isinstance(v, str):
                word = v.strip().lower()
                if word in _TRUE_WORDS:
                    return True
                if word in _FALSE_WORDS:
                    return False
            return None

        if "output_dir" in cfg and isinstance(cfg["output_dir"], str):
            s = replace(s, output_dir=cfg["output_dir"])

        if "output_format" in cfg and isinstance(cfg["output_format"], str):
            fmt = cfg["output_format"].strip().lower()
            if fmt in _FORMATS:
                s = replace(s, output_format=fmt)  # type: ignore[arg-type]
            else:
                logger.warning("ignoring unknown output_format %r", cfg["output_format"])

        for key in ("max_rows", "glimpse_width", "chart_width", "chart_height"):
            if key in cfg:
                try:
                    value = int(cfg[key])
                except (TypeError, ValueError):
                    logger.warning("ignoring non-integer %s=%r", key, cfg[key])
                    continue
                if value > 0:
                    s = replace(s, **{key: value})

        if "theme" in cfg and isinstance(cfg["theme"], str):
            theme = cfg["theme"].strip().lower()
            if theme in _THEMES:
                s = replace(s, theme=theme)  # type: ignore[arg-type]

        if "halt_on_error" in cfg:
            flag = _bool(cfg["halt_on_error"])
            if flag is None:
                logger.warning("ignoring invalid halt_on_error %r", cfg["halt_on_error"])
            else:
                s = replace(s, halt_on_error=flag)

        if "vega_cdn" in cfg and isinstance(cfg["vega_cdn"], str):
            s = replace(s, vega_cdn=cfg["vega_cdn"].rstrip("/"))

        return s

    @classmethod
    def from_env(cls, base: TourSettings | None = None, prefix: str = C.ENV_PREFIX) -> TourSettings:
        """
        Build TourSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - TIDYTOUR_OUTPUT_DIR
            - TIDYTOUR_OUTPUT_FORMAT ("html" | "md")
            - TIDYTOUR_MAX_ROWS
            - TIDYTOUR_GLIMPSE_WIDTH
            - TIDYTOUR_CHART_WIDTH / TIDYTOUR_CHART_HEIGHT
            - TIDYTOUR_THEME ("minimal" | "gray")
            - TIDYTOUR_HALT_ON_ERROR (1/0/true/false/yes/no/on/off)
            - TIDYTOUR_VEGA_CDN
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in (
            "output_dir",
            "output_format",
            "max_rows",
            "glimpse_width",
            "chart_width",
            "chart_height",
            "theme",
            "halt_on_error",
            "vega_cdn",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> TourSettings:
        """
        Build TourSettings from a TOML file.

        Search order when `path` is None:
            1) ./tidytour.toml (with either a [report] table or top-level keys)
            2) ./pyproject.toml under [tool.tidytour]

        Returns defaults if no file is present or readable.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("could not read %s: %s", p, exc)
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "tidytour.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("tidytour") if isinstance(tool, dict) else None
            elif isinstance(data.get("report"), dict):
                cfg = data["report"]
            else:
                cfg = data
            if cfg:
                logger.debug("loaded settings from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> TourSettings:
        """
        Load TourSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (tidytour.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
