"""Aesthetic mappings: which column drives which visual channel."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields, replace

from .base import FieldRef, as_field

__all__ = ["Aes", "aes", "AES_NAMES"]

AES_NAMES: tuple[str, ...] = (
    "x",
    "y",
    "color",
    "fill",
    "size",
    "shape",
    "alpha",
    "label",
    "group",
)


@dataclass(frozen=True)
class Aes:
    """
    Immutable aesthetic mapping.

    Each attribute holds a column name, a FieldRef (see factor()/ordered()), or None.
    """

    x: str | FieldRef | None = None
    y: str | FieldRef | None = None
    color: str | FieldRef | None = None
    fill: str | FieldRef | None = None
    size: str | FieldRef | None = None
    shape: str | FieldRef | None = None
    alpha: str | FieldRef | None = None
    label: str | FieldRef | None = None
    group: str | FieldRef | None = None

    def merge(self, other: Aes | None) -> Aes:
        """Return a mapping where every aesthetic set in ``other`` wins."""
        if other is None:
            return self
        updates = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **updates)

    def get(self, name: str) -> FieldRef | None:
        value = getattr(self, name)
        return None if value is None else as_field(value)

    def items(self) -> Iterator[tuple[str, FieldRef]]:
        for name in AES_NAMES:
            ref = self.get(name)
            if ref is not None:
                yield name, ref


def aes(
    x: str | FieldRef | None = None,
    y: str | FieldRef | None = None,
    *,
    color: str | FieldRef | None = None,
    colour: str | FieldRef | None = None,
    fill: str | FieldRef | None = None,
    size: str | FieldRef | None = None,
    shape: str | FieldRef | None = None,
    alpha: str | FieldRef | None = None,
    label: str | FieldRef | None = None,
    group: str | FieldRef | None = None,
) -> Aes:
    """
    Build an aesthetic mapping; ``colour`` is accepted as an alias of ``color``.

    Examples:
        >>> aes("wt", "mpg", color=factor("cyl"))  # doctest: +SKIP
    """
    return Aes(
        x=x,
        y=y,
        color=color if color is not None else colour,
        fill=fill,
        size=size,
        shape=shape,
        alpha=alpha,
        label=label,
        group=group,
    )
