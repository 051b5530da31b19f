"""
Write charts to disk.

HTML needs nothing beyond Altair. PNG and SVG go through ``vl_convert``
(the ``image`` extra); a missing converter raises RuntimeError naming the
package to install.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

__all__ = ["save"]

logger = logging.getLogger(__name__)


def _as_chart(obj: Any) -> Any:
    to_altair = getattr(obj, "to_altair", None)
    return to_altair() if to_altair is not None else obj


def _converter() -> Any:
    try:
        return importlib.import_module("vl_convert")
    except ImportError as exc:
        raise RuntimeError(
            "PNG/SVG export needs vl-convert-python; install it with `pip install tidytour[image]`"
        ) from exc


def save(
    chart: Any,
    *,
    out_html: str | Path | None = None,
    out_png: str | Path | None = None,
    out_svg: str | Path | None = None,
    scale: float = 2.0,
) -> list[Path]:
    """
    Save a Plot or Altair chart as HTML, PNG and/or SVG.

    Args:
        chart: tidytour Plot or any Altair top-level chart.
        out_html: Standalone HTML destination (vega-embed from CDN).
        out_png: PNG destination.
        out_svg: SVG destination.
        scale: PNG pixel scale factor.

    Returns:
        list[Path]: Paths written, in html/png/svg order.

    Raises:
        RuntimeError: Image output requested but vl-convert-python is not installed.
    """
    chart = _as_chart(chart)
    written: list[Path] = []

    if out_html is not None:
        path = Path(out_html)
        path.parent.mkdir(parents=True, exist_ok=True)
        chart.save(str(path), format="html")
        written.append(path)

    if out_png is not None or out_svg is not None:
        vlc = _converter()
        spec = chart.to_dict()
        if out_png is not None:
            path = Path(out_png)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(vlc.vegalite_to_png(spec, scale=scale))
            written.append(path)
        if out_svg is not None:
            path = Path(out_svg)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(vlc.vegalite_to_svg(spec), encoding="utf-8")
            written.append(path)

    for path in written:
        logger.info("wrote %s", path)
    return written
