"""Models used across the project."""

from __future__ import annotations

from pageoutline.models.element import ElementKind, ElementNode, ElementTree
from pageoutline.models.outline import OutlineOptions, OutlineResult

__all__ = [
    "ElementKind",
    "ElementNode",
    "ElementTree",
    "OutlineOptions",
    "OutlineResult",
]
