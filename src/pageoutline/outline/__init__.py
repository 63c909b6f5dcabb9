"""Outline compression engine."""

from __future__ import annotations

from pageoutline.outline.fingerprint import StructuralFingerprint, hamming_distance
from pageoutline.outline.generator import (
    compress_outline,
    generate_outline,
    generate_outline_async,
    generate_outlines,
)
from pageoutline.outline.lists import ListDetector, ListPattern
from pageoutline.outline.parser import build_tree, parse_line
from pageoutline.outline.priority import assign_priorities, score_priority
from pageoutline.outline.renderer import OutlineBudgetError, OutlineRenderer
from pageoutline.outline.wrappers import remove_wrappers

__all__ = [
    "ListDetector",
    "ListPattern",
    "OutlineBudgetError",
    "OutlineRenderer",
    "StructuralFingerprint",
    "assign_priorities",
    "build_tree",
    "compress_outline",
    "generate_outline",
    "generate_outline_async",
    "generate_outlines",
    "hamming_distance",
    "parse_line",
    "remove_wrappers",
    "score_priority",
]
